"""Product API endpoints.

Provides endpoints for browsing, searching and administering products.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.principal import get_principal, require_admin
from storefront.api.responses import to_response
from storefront.api.schemas import (
    CategorySchema,
    ErrorResponse,
    ProductCreateRequest,
    ProductSchema,
    ProductSearchResultSchema,
    ProductTypeSchema,
    ProductUpdateRequest,
    ProductVariantSchema,
    ServiceResponse,
)
from storefront.catalog.models import Category, Product, ProductType, ProductVariant
from storefront.catalog.search import ProductSearchResult, SearchService
from storefront.catalog.service import CatalogService, ProductData, VariantData
from storefront.domain.principal import Principal
from storefront.infrastructure.database import get_session

router = APIRouter(prefix="/api/product", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_catalog_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogService:
    """Get catalog service bound to the request session."""
    return CatalogService(session)


def get_search_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SearchService:
    """Get search service bound to the request session."""
    return SearchService(session)


# ============================================================================
# Converters
# ============================================================================


def category_to_schema(category: Category) -> CategorySchema:
    """Convert Category model to schema."""
    return CategorySchema(id=category.id, name=category.name, url=category.url)


def product_type_to_schema(product_type: ProductType) -> ProductTypeSchema:
    """Convert ProductType model to schema."""
    return ProductTypeSchema(id=product_type.id, name=product_type.name)


def variant_to_schema(variant: ProductVariant) -> ProductVariantSchema:
    """Convert ProductVariant model to schema."""
    loaded_type = "product_type" not in inspect(variant).unloaded
    return ProductVariantSchema(
        product_id=variant.product_id,
        product_type_id=variant.product_type_id,
        product_type=(
            product_type_to_schema(variant.product_type)
            if loaded_type and variant.product_type is not None
            else None
        ),
        price=variant.price,
        original_price=variant.original_price,
        visible=variant.visible,
        deleted=variant.deleted,
    )


def product_to_schema(product: Product) -> ProductSchema:
    """Convert Product model to schema.

    Only associations that were eagerly loaded are rendered.
    """
    unloaded = inspect(product).unloaded
    category = None
    if "category" not in unloaded and product.category is not None:
        category = category_to_schema(product.category)

    variants = []
    if "variants" not in unloaded:
        variants = [variant_to_schema(v) for v in product.variants]

    return ProductSchema(
        id=product.id,
        title=product.title,
        description=product.description,
        image_url=product.image_url,
        category_id=product.category_id,
        category=category,
        featured=product.featured,
        visible=product.visible,
        deleted=product.deleted,
        variants=variants,
    )


def products_to_schema(products: list[Product]) -> list[ProductSchema]:
    """Convert a list of Product models to schemas."""
    return [product_to_schema(p) for p in products]


def search_result_to_schema(result: ProductSearchResult) -> ProductSearchResultSchema:
    """Convert a search page to schema."""
    return ProductSearchResultSchema(
        products=products_to_schema(result.products),
        current_page=result.current_page,
        pages=result.pages,
    )


def request_to_product_data(
    request: ProductCreateRequest,
    product_id: int | None = None,
) -> ProductData:
    """Convert a create/update request to service input."""
    return ProductData(
        id=product_id,
        title=request.title,
        description=request.description,
        image_url=request.image_url,
        category_id=request.category_id,
        visible=request.visible,
        featured=request.featured,
        variants=[
            VariantData(
                product_type_id=v.product_type_id,
                price=v.price,
                original_price=v.original_price,
                visible=v.visible,
                deleted=v.deleted,
            )
            for v in request.variants
        ],
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ServiceResponse[list[ProductSchema]],
    summary="List products",
    description="List products visible to shoppers.",
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> JSONResponse:
    """List shopper-visible products with their visible variants."""
    return to_response(await service.list_products(), products_to_schema)


@router.get(
    "/featured",
    response_model=ServiceResponse[list[ProductSchema]],
    summary="List featured products",
)
async def list_featured_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> JSONResponse:
    """List featured, shopper-visible products."""
    return to_response(await service.list_featured_products(), products_to_schema)


@router.get(
    "/admin",
    response_model=ServiceResponse[list[ProductSchema]],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="List products for administration",
    description="List all non-deleted products, hidden ones included. Admin only.",
)
async def list_admin_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    _: Annotated[Principal, Depends(require_admin)],
) -> JSONResponse:
    """List every non-deleted product with its non-deleted variants."""
    return to_response(await service.list_admin_products(), products_to_schema)


@router.get(
    "/category/{category_url}",
    response_model=ServiceResponse[list[ProductSchema]],
    summary="List products by category",
)
async def list_products_by_category(
    category_url: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> JSONResponse:
    """List shopper-visible products of a category slug (case-insensitive)."""
    return to_response(
        await service.list_products_by_category(category_url), products_to_schema
    )


@router.get(
    "/search/{search_text}",
    response_model=ServiceResponse[ProductSearchResultSchema],
    summary="Search products (first page)",
)
@router.get(
    "/search/{search_text}/{page}",
    response_model=ServiceResponse[ProductSearchResultSchema],
    responses={400: {"model": ServiceResponse[ProductSearchResultSchema]}},
    summary="Search products",
    description="Search title and description; results are paginated.",
)
async def search_products(
    search_text: str,
    service: Annotated[SearchService, Depends(get_search_service)],
    page: int = 1,
) -> JSONResponse:
    """Return one page of products matching the search text."""
    return to_response(
        await service.search_products(search_text, page), search_result_to_schema
    )


@router.get(
    "/searchsuggestions/{search_text}",
    response_model=ServiceResponse[list[str]],
    summary="Search suggestions",
)
async def get_search_suggestions(
    search_text: str,
    service: Annotated[SearchService, Depends(get_search_service)],
) -> JSONResponse:
    """Suggest titles and description words containing the search text."""
    return to_response(await service.get_search_suggestions(search_text))


@router.get(
    "/{product_id:int}",
    response_model=ServiceResponse[ProductSchema],
    responses={404: {"model": ServiceResponse[ProductSchema]}},
    summary="Get product",
    description="Get a product with the variants the caller may see.",
)
async def get_product(
    product_id: int,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> JSONResponse:
    """Get a product by ID.

    Admins also see hidden products and variants.
    """
    return to_response(await service.get_product(product_id, principal), product_to_schema)


@router.post(
    "",
    response_model=ServiceResponse[ProductSchema],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    request: ProductCreateRequest,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    _: Annotated[Principal, Depends(require_admin)],
) -> JSONResponse:
    """Create a product with its variants. Admin only."""
    return to_response(
        await service.create_product(request_to_product_data(request)), product_to_schema
    )


@router.put(
    "",
    response_model=ServiceResponse[ProductSchema],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Update product",
)
async def update_product(
    request: ProductUpdateRequest,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    _: Annotated[Principal, Depends(require_admin)],
) -> JSONResponse:
    """Update a product and upsert its variants. Admin only."""
    return to_response(
        await service.update_product(request_to_product_data(request, request.id)),
        product_to_schema,
    )


@router.delete(
    "/{product_id:int}",
    response_model=ServiceResponse[bool],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Delete product",
    description="Soft-delete a product. Admin only.",
)
async def delete_product(
    product_id: int,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    _: Annotated[Principal, Depends(require_admin)],
) -> JSONResponse:
    """Soft-delete a product."""
    return to_response(await service.delete_product(product_id))


# ============================================================================
# Lookup Endpoints
# ============================================================================


product_type_router = APIRouter(prefix="/api/producttype", tags=["Product Types"])
category_router = APIRouter(prefix="/api/category", tags=["Categories"])


@product_type_router.get(
    "",
    response_model=ServiceResponse[list[ProductTypeSchema]],
    summary="List product types",
)
async def list_product_types(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> JSONResponse:
    """List all product types."""
    return to_response(
        await service.list_product_types(),
        lambda types: [product_type_to_schema(t) for t in types],
    )


@category_router.get(
    "",
    response_model=ServiceResponse[list[CategorySchema]],
    summary="List categories",
)
async def list_categories(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> JSONResponse:
    """List all categories."""
    return to_response(
        await service.list_categories(),
        lambda categories: [category_to_schema(c) for c in categories],
    )
