"""Catalog service for product operations.

High-level service that combines repository operations with the
visibility policy for browsing and administering the catalog.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import ColumnElement, and_, func, true
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.demo_data import build_demo_catalog
from storefront.catalog.models import Category, Product, ProductType, ProductVariant
from storefront.catalog.repository import CatalogRepository
from storefront.catalog.visibility import eligibility_clause, not_deleted_clause
from storefront.domain.exceptions import (
    DomainError,
    DuplicateVariantError,
    NegativePriceError,
    ProductNotFoundError,
)
from storefront.domain.principal import Principal, Role, role_of
from storefront.domain.results import ServiceResult

logger = structlog.get_logger()


@dataclass
class VariantData:
    """Variant fields accepted on product create/update.

    Attributes:
        product_type_id: Product type the variant is sold as.
        price: Unit price.
        original_price: List price before discount.
        visible: Shopper visibility.
        deleted: Soft-delete flag.
    """

    product_type_id: int
    price: Decimal
    original_price: Decimal = Decimal("0.00")
    visible: bool = True
    deleted: bool = False


@dataclass
class ProductData:
    """Product fields accepted on create/update.

    Attributes:
        title: Product title.
        category_id: Owning category.
        description: Product description.
        image_url: Product image URL.
        visible: Shopper visibility.
        featured: Featured shelf flag.
        variants: Variants to create or update.
        id: Product ID, required for updates.
    """

    title: str
    category_id: int
    description: str | None = None
    image_url: str | None = None
    visible: bool = True
    featured: bool = False
    variants: list[VariantData] = field(default_factory=list)
    id: int | None = None


class CatalogService:
    """Service for catalog browsing and administration.

    Every read applies the visibility policy to products and to their
    variants; the caller's role selects which records are eligible.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(session)
            result = await service.get_product(1, Principal(id=7, role=Role.ADMIN))
            featured = await service.list_featured_products()
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = CatalogRepository(session)

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------

    async def get_product(
        self,
        product_id: int,
        principal: Principal | None = None,
    ) -> ServiceResult[Product]:
        """Get a product with the variants the caller may see.

        Args:
            product_id: Product ID.
            principal: Caller; anonymous callers are shoppers.

        Returns:
            Result with the product, or NOT_FOUND when the product is
            missing, deleted, or hidden from the caller.
        """
        role = role_of(principal)
        product = await self.repository.get_product_by_id(
            product_id,
            condition=eligibility_clause(Product, role),
            variant_condition=eligibility_clause(ProductVariant, role),
        )

        if product is None:
            return ServiceResult.fail(ProductNotFoundError(product_id))

        return ServiceResult.ok(product)

    async def list_products(self) -> ServiceResult[list[Product]]:
        """List products visible to shoppers."""
        return ServiceResult.ok(await self._shopper_products())

    async def list_products_by_category(self, category_url: str) -> ServiceResult[list[Product]]:
        """List shopper-visible products of a category.

        Args:
            category_url: Category slug, compared case-insensitively.

        Returns:
            Result with matching products; unknown slugs yield an empty list.
        """
        in_category = Product.category.has(
            func.lower(Category.url) == category_url.lower()
        )
        return ServiceResult.ok(await self._shopper_products(in_category))

    async def list_featured_products(self) -> ServiceResult[list[Product]]:
        """List featured products visible to shoppers."""
        return ServiceResult.ok(await self._shopper_products(Product.featured == true()))

    async def list_admin_products(self) -> ServiceResult[list[Product]]:
        """List all non-deleted products, hidden ones included.

        Access control for this listing belongs to the caller (route level).
        """
        products = await self.repository.find_products(
            not_deleted_clause(Product),
            variant_condition=not_deleted_clause(ProductVariant),
            include_product_type=True,
            include_category=True,
        )
        return ServiceResult.ok(list(products))

    async def list_product_types(self) -> ServiceResult[list[ProductType]]:
        """List all product types."""
        return ServiceResult.ok(await self.repository.list_product_types())

    async def list_categories(self) -> ServiceResult[list[Category]]:
        """List all categories."""
        return ServiceResult.ok(await self.repository.list_categories())

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def create_product(self, data: ProductData) -> ServiceResult[Product]:
        """Create a product with its variants.

        Args:
            data: Product fields and variants.

        Returns:
            Result with the created product, or VALIDATION_FAILURE for
            negative prices or repeated product types.
        """
        try:
            self._validate_variants(data)
        except DomainError as e:
            return ServiceResult.fail(e)

        product = Product(
            title=data.title,
            description=data.description,
            image_url=data.image_url,
            category_id=data.category_id,
            visible=data.visible,
            featured=data.featured,
            deleted=False,
            variants=[
                ProductVariant(
                    product_type_id=v.product_type_id,
                    price=v.price,
                    original_price=v.original_price,
                    visible=v.visible,
                    deleted=v.deleted,
                )
                for v in data.variants
            ],
        )
        await self.repository.insert_product(product)
        await self.session.commit()

        logger.info(
            "Product created",
            product_id=product.id,
            variant_count=len(data.variants),
        )

        return ServiceResult.ok(await self._reload(product.id))

    async def update_product(self, data: ProductData) -> ServiceResult[Product]:
        """Update a product and upsert its variants.

        Variants are matched by product type; unmatched ones are added.

        Args:
            data: Product fields and variants; ``data.id`` selects the product.

        Returns:
            Result with the updated product, or NOT_FOUND / VALIDATION_FAILURE.
        """
        try:
            self._validate_variants(data)
            product = None
            if data.id is not None:
                product = await self.repository.get_product_by_id(
                    data.id, include_product_type=False
                )
            if product is None:
                raise ProductNotFoundError(data.id or 0, "Product not found.")
        except DomainError as e:
            return ServiceResult.fail(e)

        product.title = data.title
        product.description = data.description
        product.image_url = data.image_url
        product.category_id = data.category_id
        product.visible = data.visible
        product.featured = data.featured

        existing = {v.product_type_id: v for v in product.variants}
        for v in data.variants:
            variant = existing.get(v.product_type_id)
            if variant is None:
                product.variants.append(
                    ProductVariant(
                        product_type_id=v.product_type_id,
                        price=v.price,
                        original_price=v.original_price,
                        visible=v.visible,
                        deleted=v.deleted,
                    )
                )
                continue
            variant.price = v.price
            variant.original_price = v.original_price
            variant.visible = v.visible
            variant.deleted = v.deleted

        await self.repository.update_product(product)
        await self.session.commit()

        logger.info("Product updated", product_id=product.id)

        return ServiceResult.ok(await self._reload(product.id))

    async def delete_product(self, product_id: int) -> ServiceResult[bool]:
        """Soft-delete a product.

        Args:
            product_id: Product ID.

        Returns:
            Result with True, or NOT_FOUND when the product does not exist.
        """
        if not await self.repository.soft_delete_product(product_id):
            return ServiceResult.fail(ProductNotFoundError(product_id, "Product not found."))
        await self.session.commit()

        logger.info("Product deleted", product_id=product_id)
        return ServiceResult.ok(True)

    async def seed_catalog(self, clear_existing: bool = True) -> dict[str, Any]:
        """Seed the demo catalog.

        Args:
            clear_existing: Whether to delete existing catalog and cart rows first.

        Returns:
            Seeding result with counts.
        """
        deleted = 0
        if clear_existing:
            deleted = await self.repository.clear_catalog()

        catalog = build_demo_catalog()
        await self.repository.save_all(list(catalog.categories.values()))
        await self.repository.save_all(list(catalog.product_types.values()))
        await self.repository.save_all(catalog.products)
        await self.session.commit()

        logger.info(
            "Catalog seeded",
            deleted=deleted,
            products_created=len(catalog.products),
        )

        return {
            "deleted": deleted,
            "categories_created": len(catalog.categories),
            "product_types_created": len(catalog.product_types),
            "products_created": len(catalog.products),
            "variants_created": catalog.variant_count,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _shopper_products(
        self,
        condition: ColumnElement[bool] | None = None,
    ) -> list[Product]:
        product_condition = eligibility_clause(Product, Role.SHOPPER)
        if condition is not None:
            product_condition = and_(condition, product_condition)

        products = await self.repository.find_products(
            product_condition,
            variant_condition=eligibility_clause(ProductVariant, Role.SHOPPER),
            include_product_type=True,
        )
        return list(products)

    async def _reload(self, product_id: int) -> Product | None:
        return await self.repository.get_product_by_id(
            product_id,
            variant_condition=not_deleted_clause(ProductVariant),
        )

    @staticmethod
    def _validate_variants(data: ProductData) -> None:
        seen: set[int] = set()
        for v in data.variants:
            if v.price < 0 or v.original_price < 0:
                raise NegativePriceError(v.product_type_id, min(v.price, v.original_price))
            if v.product_type_id in seen:
                raise DuplicateVariantError(v.product_type_id)
            seen.add(v.product_type_id)
