"""Cart API endpoints.

Provides endpoints for resolving cart references and managing the
stored cart of the signed-in user.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.principal import get_principal
from storefront.api.responses import to_response
from storefront.api.schemas import CartItemSchema, CartProductSchema, ServiceResponse
from storefront.cart.service import CartItemReference, CartLineItem, CartService
from storefront.domain.principal import Principal
from storefront.infrastructure.database import get_session

router = APIRouter(prefix="/api/cart", tags=["Cart"])

UNAUTHENTICATED_RESPONSE = {401: {"model": ServiceResponse[bool]}}


# ============================================================================
# Dependencies
# ============================================================================


def get_cart_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CartService:
    """Get cart service bound to the request session."""
    return CartService(session)


# ============================================================================
# Converters
# ============================================================================


def schema_to_reference(item: CartItemSchema) -> CartItemReference:
    """Convert request item to a cart reference."""
    return CartItemReference(
        product_id=item.product_id,
        product_type_id=item.product_type_id,
        quantity=item.quantity,
    )


def lines_to_schema(lines: list[CartLineItem]) -> list[CartProductSchema]:
    """Convert resolved line items to response schemas."""
    return [
        CartProductSchema(
            product_id=line.product_id,
            title=line.title,
            image_url=line.image_url,
            price=line.price,
            product_type=line.product_type,
            product_type_id=line.product_type_id,
            quantity=line.quantity,
        )
        for line in lines
    ]


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/products",
    response_model=ServiceResponse[list[CartProductSchema]],
    summary="Resolve cart items",
    description="Price cart references against the current catalog. "
    "References that no longer resolve are omitted.",
)
async def get_cart_products(
    items: list[CartItemSchema],
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Resolve a client-side cart."""
    references = [schema_to_reference(i) for i in items]
    return to_response(await service.get_cart_products(references, principal), lines_to_schema)


@router.post(
    "",
    response_model=ServiceResponse[list[CartProductSchema]],
    responses=UNAUTHENTICATED_RESPONSE,
    summary="Store cart items",
    description="Store items in the caller's cart and return the whole cart.",
)
async def store_cart_items(
    items: list[CartItemSchema],
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Store a client-side cart for the signed-in user."""
    references = [schema_to_reference(i) for i in items]
    return to_response(await service.store_cart_items(references, principal), lines_to_schema)


@router.post(
    "/add",
    response_model=ServiceResponse[bool],
    responses=UNAUTHENTICATED_RESPONSE,
    summary="Add item to cart",
)
async def add_to_cart(
    item: CartItemSchema,
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Add an item, or increase its quantity when already in the cart."""
    return to_response(await service.add_to_cart(schema_to_reference(item), principal))


@router.put(
    "/update-quantity",
    response_model=ServiceResponse[bool],
    responses=UNAUTHENTICATED_RESPONSE,
    summary="Update item quantity",
)
async def update_quantity(
    item: CartItemSchema,
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Set the quantity of an item in the cart."""
    return to_response(await service.update_quantity(schema_to_reference(item), principal))


@router.delete(
    "/{product_id:int}/{product_type_id:int}",
    response_model=ServiceResponse[bool],
    responses=UNAUTHENTICATED_RESPONSE,
    summary="Remove item from cart",
)
async def remove_item_from_cart(
    product_id: int,
    product_type_id: int,
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Remove an item from the cart."""
    return to_response(
        await service.remove_item_from_cart(product_id, product_type_id, principal)
    )


@router.get(
    "/count",
    response_model=ServiceResponse[int],
    responses=UNAUTHENTICATED_RESPONSE,
    summary="Count cart items",
)
async def count_cart_items(
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Count stored cart rows of the caller."""
    return to_response(await service.count_cart_items(principal))


@router.get(
    "",
    response_model=ServiceResponse[list[CartProductSchema]],
    responses=UNAUTHENTICATED_RESPONSE,
    summary="Get stored cart",
)
async def get_db_cart_products(
    service: Annotated[CartService, Depends(get_cart_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Resolve the caller's stored cart."""
    return to_response(await service.get_db_cart_products(principal), lines_to_schema)
