"""Catalog repository for database operations.

Store adapter over the catalog and cart tables. Callers pass filter
conditions (built from the visibility policy) and choose which
associations to load; the repository never decides visibility itself.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.catalog.models import (
    CartItem,
    Category,
    Product,
    ProductType,
    ProductVariant,
)


class CatalogRepository:
    """Repository for catalog and cart database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CatalogRepository(session)
            products = await repo.find_products(
                eligibility_clause(Product),
                variant_condition=eligibility_clause(ProductVariant),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def get_product_by_id(
        self,
        product_id: int,
        condition: ColumnElement[bool] | None = None,
        variant_condition: ColumnElement[bool] | None = None,
        include_variants: bool = True,
        include_product_type: bool = True,
    ) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.
            condition: Extra condition the product row must satisfy.
            variant_condition: Condition restricting which variants are loaded.
            include_variants: Whether to eagerly load variants.
            include_product_type: Whether to load each variant's product type.

        Returns:
            Product if found, None otherwise.
        """
        query = select(Product).where(Product.id == product_id)

        if condition is not None:
            query = query.where(condition)

        if include_variants:
            query = query.options(
                self._variant_loader(variant_condition, include_product_type)
            ).execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_products(
        self,
        condition: ColumnElement[bool] | None = None,
        variant_condition: ColumnElement[bool] | None = None,
        include_variants: bool = True,
        include_product_type: bool = False,
        include_category: bool = False,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[Product]:
        """Find products matching a condition, in store (primary key) order.

        Args:
            condition: WHERE clause over products.
            variant_condition: Condition restricting which variants are loaded.
            include_variants: Whether to eagerly load variants.
            include_product_type: Whether to load each variant's product type.
            include_category: Whether to load the product category.
            limit: Maximum results.
            offset: Result offset for pagination.

        Returns:
            Sequence of matching products.
        """
        query = select(Product)

        if condition is not None:
            query = query.where(condition)

        query = query.order_by(Product.id)

        if limit is not None:
            query = query.limit(limit)
        if offset is not None:
            query = query.offset(offset)

        # Eager loading
        if include_variants:
            query = query.options(
                self._variant_loader(variant_condition, include_product_type)
            )
        if include_category:
            query = query.options(selectinload(Product.category))
        if include_variants or include_category:
            query = query.execution_options(populate_existing=True)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_products(self, condition: ColumnElement[bool] | None = None) -> int:
        """Count products matching a condition.

        Args:
            condition: WHERE clause over products.

        Returns:
            Count of matching products.
        """
        query = select(func.count(Product.id))

        if condition is not None:
            query = query.where(condition)

        result = await self.session.execute(query)
        return result.scalar_one()

    async def insert_product(self, product: Product) -> Product:
        """Add a new product (with its variants) to the database.

        Args:
            product: Product to insert.

        Returns:
            Inserted product with generated ID.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def update_product(self, product: Product) -> Product:
        """Flush pending changes of a loaded product.

        Args:
            product: Product previously loaded through this repository.

        Returns:
            Updated product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def soft_delete_product(self, product_id: int) -> bool:
        """Mark a product deleted without removing the row.

        Args:
            product_id: Product ID.

        Returns:
            False if the product does not exist.
        """
        product = await self.get_product_by_id(product_id, include_variants=False)
        if product is None:
            return False

        product.deleted = True
        await self.session.flush()
        return True

    async def save_all(self, records: Sequence[Any]) -> None:
        """Add catalog records (with cascaded children) and flush.

        Args:
            records: Categories, product types or products to insert.
        """
        self.session.add_all(records)
        await self.session.flush()

    async def clear_catalog(self) -> int:
        """Delete every catalog and cart row.

        Returns:
            Number of deleted products.
        """
        count = await self.count_products()
        for model in (CartItem, ProductVariant, Product, ProductType, Category):
            await self.session.execute(delete(model))
        self.session.expunge_all()
        await self.session.flush()
        return count

    # ------------------------------------------------------------------
    # Variants and lookups
    # ------------------------------------------------------------------

    async def get_variant(
        self,
        product_id: int,
        product_type_id: int,
        condition: ColumnElement[bool] | None = None,
    ) -> ProductVariant | None:
        """Get the variant of a product for a product type, with the type loaded.

        Args:
            product_id: Product ID.
            product_type_id: Product type ID.
            condition: Extra condition the variant row must satisfy.

        Returns:
            Variant if found, None otherwise.
        """
        query = (
            select(ProductVariant)
            .where(
                ProductVariant.product_id == product_id,
                ProductVariant.product_type_id == product_type_id,
            )
            .options(selectinload(ProductVariant.product_type))
        )

        if condition is not None:
            query = query.where(condition)

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_product_types(self) -> list[ProductType]:
        """Get all product types ordered by ID."""
        result = await self.session.execute(select(ProductType).order_by(ProductType.id))
        return list(result.scalars().all())

    async def list_categories(self) -> list[Category]:
        """Get all categories ordered by ID."""
        result = await self.session.execute(select(Category).order_by(Category.id))
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Cart items
    # ------------------------------------------------------------------

    async def save_cart_items(self, items: list[CartItem]) -> list[CartItem]:
        """Save multiple cart items to database.

        Args:
            items: Cart items to save.

        Returns:
            Saved cart items.
        """
        self.session.add_all(items)
        await self.session.flush()
        return items

    async def get_cart_item(
        self,
        user_id: int,
        product_id: int,
        product_type_id: int,
    ) -> CartItem | None:
        """Get a user's cart item for a product/type pair.

        Returns:
            Cart item if found, None otherwise.
        """
        return await self.session.get(CartItem, (user_id, product_id, product_type_id))

    async def find_cart_items_by_owner(self, user_id: int) -> list[CartItem]:
        """Get all cart items of a user in insertion order.

        Args:
            user_id: Owner ID.

        Returns:
            List of cart items.
        """
        query = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.added_at, CartItem.product_id, CartItem.product_type_id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_cart_items(self, user_id: int) -> int:
        """Count cart items owned by a user.

        Args:
            user_id: Owner ID.

        Returns:
            Number of stored cart rows.
        """
        query = select(func.count()).select_from(CartItem).where(CartItem.user_id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def delete_cart_item(
        self,
        user_id: int,
        product_id: int,
        product_type_id: int,
    ) -> bool:
        """Delete a user's cart item.

        Returns:
            False if no row was deleted.
        """
        item = await self.get_cart_item(user_id, product_id, product_type_id)
        if item is None:
            return False

        await self.session.delete(item)
        await self.session.flush()
        return True

    def _variant_loader(
        self,
        variant_condition: ColumnElement[bool] | None,
        include_product_type: bool,
    ) -> Any:
        """Build the eager loader for product variants.

        Args:
            variant_condition: Condition restricting loaded variants.
            include_product_type: Whether to chain-load product types.

        Returns:
            Loader option.
        """
        relationship = Product.variants
        if variant_condition is not None:
            relationship = Product.variants.and_(variant_condition)

        loader = selectinload(relationship)
        if include_product_type:
            loader = loader.selectinload(ProductVariant.product_type)
        return loader
