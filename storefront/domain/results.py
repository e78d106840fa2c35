"""Service result envelope returned by every catalog and cart operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from storefront.domain.exceptions import DomainError

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of a service operation.

    Attributes:
        data: Payload, None on failure.
        success: Whether the operation succeeded.
        message: Human-readable message (empty on success).
        error_code: Machine-readable failure category, None on success.
    """

    data: T | None = None
    success: bool = True
    message: str = ""
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T, message: str = "") -> "ServiceResult[T]":
        """Build a successful result."""
        return cls(data=data, message=message)

    @classmethod
    def fail(cls, error: DomainError) -> "ServiceResult[T]":
        """Build a failed result from a domain error."""
        return cls(
            data=None,
            success=False,
            message=error.message,
            error_code=error.error_code,
        )
