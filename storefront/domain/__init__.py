"""Domain layer - caller identity, result envelope, domain errors.

Example usage:
    from storefront.domain import Principal, Role, ServiceResult

    admin = Principal(id=1, role=Role.ADMIN)
    result = await catalog.get_product(42, admin)
    if not result.success:
        print(result.error_code, result.message)
"""

from storefront.domain.exceptions import (
    CartItemNotFoundError,
    DomainError,
    DuplicateVariantError,
    InvalidPageError,
    InvalidQuantityError,
    InvalidSearchTextError,
    NegativePriceError,
    NotFoundError,
    ProductNotFoundError,
    UnauthenticatedError,
    ValidationFailureError,
)
from storefront.domain.principal import Principal, Role, role_of
from storefront.domain.results import ServiceResult

__all__ = [
    # Identity
    "Principal",
    "Role",
    "role_of",
    # Results
    "ServiceResult",
    # Exceptions
    "DomainError",
    "NotFoundError",
    "UnauthenticatedError",
    "ValidationFailureError",
    "ProductNotFoundError",
    "NegativePriceError",
    "DuplicateVariantError",
    "InvalidPageError",
    "InvalidSearchTextError",
    "CartItemNotFoundError",
    "InvalidQuantityError",
]
