"""API schemas for the Storefront API.

Pydantic models for request/response validation and serialization.
"""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, Field, PlainSerializer

T = TypeVar("T")

# Decimal in Python, JSON number on the wire
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ============================================================================
# Common Schemas
# ============================================================================


class ServiceResponse(BaseModel, Generic[T]):
    """Envelope returned by every catalog and cart endpoint."""

    data: T | None = Field(default=None, description="Payload, null on failure")
    success: bool = Field(default=True, description="Whether the operation succeeded")
    message: str = Field(default="", description="Human-readable message")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response for failures outside the service envelope."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Catalog Schemas
# ============================================================================


class CategorySchema(BaseModel):
    """Product category."""

    id: int = Field(..., description="Category identifier")
    name: str = Field(..., description="Display name")
    url: str = Field(..., description="URL slug")


class ProductTypeSchema(BaseModel):
    """Product type (variant dimension)."""

    id: int = Field(..., description="Product type identifier")
    name: str = Field(..., description="Product type name")


class ProductVariantSchema(BaseModel):
    """Priced variant of a product."""

    product_id: int = Field(..., description="Owning product")
    product_type_id: int = Field(..., description="Product type identifier")
    product_type: ProductTypeSchema | None = Field(
        default=None, description="Product type, when loaded"
    )
    price: Price = Field(..., description="Current unit price")
    original_price: Price = Field(default=Decimal("0.00"), description="List price")
    visible: bool = Field(default=True, description="Shopper visibility")
    deleted: bool = Field(default=False, description="Soft-delete flag")


class ProductSchema(BaseModel):
    """Catalog product with its eligible variants."""

    id: int = Field(..., description="Product identifier")
    title: str = Field(..., description="Product title")
    description: str | None = Field(default=None, description="Product description")
    image_url: str | None = Field(default=None, description="Product image URL")
    category_id: int = Field(..., description="Owning category")
    category: CategorySchema | None = Field(
        default=None, description="Category, when loaded"
    )
    featured: bool = Field(default=False, description="Featured shelf flag")
    visible: bool = Field(default=True, description="Shopper visibility")
    deleted: bool = Field(default=False, description="Soft-delete flag")
    variants: list[ProductVariantSchema] = Field(
        default_factory=list, description="Variants eligible for the caller"
    )


class ProductSearchResultSchema(BaseModel):
    """One page of search results."""

    products: list[ProductSchema] = Field(..., description="Products on this page")
    current_page: int = Field(..., description="Requested page (1-based)")
    pages: int = Field(..., description="Total number of pages")


class ProductVariantInput(BaseModel):
    """Variant fields for product create/update."""

    product_type_id: int = Field(..., description="Product type identifier")
    price: Decimal = Field(..., description="Unit price")
    original_price: Decimal = Field(default=Decimal("0.00"), description="List price")
    visible: bool = Field(default=True)
    deleted: bool = Field(default=False)


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    title: str = Field(..., min_length=1, max_length=500, description="Product title")
    description: str | None = Field(default=None, description="Product description")
    image_url: str | None = Field(default=None, max_length=1000)
    category_id: int = Field(..., description="Owning category")
    visible: bool = Field(default=True)
    featured: bool = Field(default=False)
    variants: list[ProductVariantInput] = Field(default_factory=list)


class ProductUpdateRequest(ProductCreateRequest):
    """Request to update a product; variants are upserted by product type."""

    id: int = Field(..., description="Product to update")


# ============================================================================
# Cart Schemas
# ============================================================================


class CartItemSchema(BaseModel):
    """Cart reference sent by the client."""

    product_id: int = Field(..., description="Referenced product")
    product_type_id: int = Field(..., description="Referenced product type")
    quantity: int = Field(default=1, description="Requested quantity")


class CartProductSchema(BaseModel):
    """Cart line item priced against the current catalog."""

    product_id: int = Field(..., description="Product identifier")
    title: str = Field(..., description="Product title")
    image_url: str | None = Field(default=None, description="Product image URL")
    price: Price = Field(..., description="Current unit price")
    product_type: str = Field(..., description="Product type name")
    product_type_id: int = Field(..., description="Product type identifier")
    quantity: int = Field(..., description="Requested quantity")
