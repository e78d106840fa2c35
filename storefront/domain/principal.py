"""Caller identity passed explicitly into every service operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Self


class Role(str, Enum):
    """Caller role consumed by the visibility policy."""

    SHOPPER = "Shopper"
    ADMIN = "Admin"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        """Parse a role claim, falling back to shopper for unknown values.

        Args:
            value: Raw role claim (case-insensitive).

        Returns:
            Matching role, SHOPPER when absent or unrecognized.
        """
        if value:
            for role in cls:
                if role.value.lower() == value.strip().lower():
                    return role
        return cls.SHOPPER


@dataclass(frozen=True)
class Principal:
    """The caller of an operation.

    Attributes:
        id: Numeric user identity, None for anonymous callers.
        role: Caller role.
    """

    id: int | None = None
    role: Role = Role.SHOPPER

    @classmethod
    def anonymous(cls) -> Self:
        """Unauthenticated shopper."""
        return cls()

    @property
    def is_authenticated(self) -> bool:
        """Whether the principal carries an identity."""
        return self.id is not None

    @property
    def is_admin(self) -> bool:
        """Whether the principal has the admin role."""
        return self.role is Role.ADMIN


def role_of(principal: Principal | None) -> Role:
    """Get the effective role of a possibly missing principal."""
    if principal is None:
        return Role.SHOPPER
    return principal.role
