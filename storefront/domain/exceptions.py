"""Domain exceptions.

All domain-level errors that represent business rule violations.
Services raise them internally and convert them into failed
ServiceResult envelopes at their boundary; they never reach callers.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Error Categories
# ============================================================================


class NotFoundError(DomainError):
    """Entity absent or filtered out by the visibility policy."""

    error_code = "NOT_FOUND"


class UnauthenticatedError(DomainError):
    """Operation requires a caller identity but none is present."""

    error_code = "UNAUTHENTICATED"

    def __init__(self, operation: str) -> None:
        """Initialize unauthenticated error.

        Args:
            operation: Name of the operation that required an identity.
        """
        super().__init__(
            "You must be signed in to do that.",
            details={"operation": operation},
        )


class ValidationFailureError(DomainError):
    """Malformed input."""

    error_code = "VALIDATION_FAILURE"


# ============================================================================
# Catalog Errors
# ============================================================================


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist or is not eligible."""

    def __init__(
        self,
        product_id: int,
        message: str = "Sorry, but a product does not exist.",
    ) -> None:
        """Initialize product not found error.

        Args:
            product_id: Requested product ID.
            message: Message shown to the caller.
        """
        super().__init__(message, details={"product_id": product_id})


class NegativePriceError(ValidationFailureError):
    """Raised when a variant is given a negative price."""

    def __init__(self, product_type_id: int, price: Any) -> None:
        """Initialize negative price error.

        Args:
            product_type_id: Product type of the offending variant.
            price: The rejected price.
        """
        super().__init__(
            f"Price cannot be negative: {price}",
            details={"product_type_id": product_type_id, "price": str(price)},
        )


class DuplicateVariantError(ValidationFailureError):
    """Raised when a product is given two variants of the same product type."""

    def __init__(self, product_type_id: int) -> None:
        """Initialize duplicate variant error.

        Args:
            product_type_id: Product type that appears more than once.
        """
        super().__init__(
            f"Only one variant per product type is allowed: {product_type_id}",
            details={"product_type_id": product_type_id},
        )


# ============================================================================
# Search Errors
# ============================================================================


class InvalidPageError(ValidationFailureError):
    """Raised when a search page number is below 1."""

    def __init__(self, page: int) -> None:
        """Initialize invalid page error.

        Args:
            page: The rejected page number.
        """
        super().__init__(
            f"Page must be 1 or greater, got {page}",
            details={"page": page},
        )


class InvalidSearchTextError(ValidationFailureError):
    """Raised when the search text is empty or whitespace."""

    def __init__(self) -> None:
        """Initialize invalid search text error."""
        super().__init__("Search text cannot be empty.")


# ============================================================================
# Cart Errors
# ============================================================================


class CartItemNotFoundError(NotFoundError):
    """Raised when a persisted cart item is not found."""

    def __init__(self, product_id: int, product_type_id: int) -> None:
        """Initialize cart item not found error.

        Args:
            product_id: Product of the missing item.
            product_type_id: Product type of the missing item.
        """
        super().__init__(
            "Cart item does not exist.",
            details={"product_id": product_id, "product_type_id": product_type_id},
        )


class InvalidQuantityError(ValidationFailureError):
    """Raised when an invalid quantity is provided."""

    def __init__(self, quantity: int, reason: str = "Quantity must be positive") -> None:
        """Initialize invalid quantity error.

        Args:
            quantity: The invalid quantity value.
            reason: Explanation of why the quantity is invalid.
        """
        super().__init__(
            f"Invalid quantity {quantity}: {reason}",
            details={"quantity": quantity, "reason": reason},
        )
