"""Cart application service.

Resolves loose cart references into priced line items against the
current catalog, and manages the carts stored for signed-in users.
Line items are never stored; they are recomputed on every read so prices
and availability always reflect the live catalog.
"""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import CartItem, Product, ProductVariant
from storefront.catalog.repository import CatalogRepository
from storefront.catalog.visibility import eligibility_clause
from storefront.domain.exceptions import (
    CartItemNotFoundError,
    DomainError,
    InvalidQuantityError,
    UnauthenticatedError,
)
from storefront.domain.principal import Principal, role_of
from storefront.domain.results import ServiceResult

logger = structlog.get_logger()


@dataclass
class CartItemReference:
    """Shopper intent to buy a product variant.

    Attributes:
        product_id: Referenced product.
        product_type_id: Referenced product type (selects the variant).
        quantity: Requested quantity.
        user_id: Owner, stamped by the service when the cart is stored.
    """

    product_id: int
    product_type_id: int
    quantity: int = 1
    user_id: int | None = None

    @classmethod
    def from_cart_item(cls, item: CartItem) -> "CartItemReference":
        """Build a reference from a stored cart row."""
        return cls(
            product_id=item.product_id,
            product_type_id=item.product_type_id,
            quantity=item.quantity,
            user_id=item.user_id,
        )


@dataclass
class CartLineItem:
    """A cart reference priced against the current catalog.

    Attributes:
        product_id: Product ID.
        title: Product title.
        image_url: Product image URL.
        price: Current unit price of the variant.
        product_type: Product type name.
        product_type_id: Product type ID.
        quantity: Requested quantity.
    """

    product_id: int
    title: str
    image_url: str | None
    price: Decimal
    product_type: str
    product_type_id: int
    quantity: int


class CartService:
    """Service for cart resolution and stored carts.

    Example usage:
        async with async_session_factory() as session:
            service = CartService(session)
            result = await service.get_cart_products(
                [CartItemReference(product_id=1, product_type_id=2, quantity=3)],
            )
            for line in result.data:
                print(line.title, line.price * line.quantity)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = CatalogRepository(session)

    async def get_cart_products(
        self,
        references: list[CartItemReference],
        principal: Principal | None = None,
    ) -> ServiceResult[list[CartLineItem]]:
        """Resolve cart references into line items.

        References whose product or variant is missing, deleted, or hidden
        from the caller are skipped. Output keeps the input order.

        Args:
            references: Cart references to resolve.
            principal: Caller whose role selects eligible records.

        Returns:
            Result with the resolved line items.
        """
        role = role_of(principal)
        lines: list[CartLineItem] = []

        for ref in references:
            product = await self.repository.get_product_by_id(
                ref.product_id,
                condition=eligibility_clause(Product, role),
                include_variants=False,
            )
            if product is None:
                logger.debug(
                    "Skipping unresolved cart reference",
                    product_id=ref.product_id,
                    product_type_id=ref.product_type_id,
                    reason="product",
                )
                continue

            variant = await self.repository.get_variant(
                ref.product_id,
                ref.product_type_id,
                condition=eligibility_clause(ProductVariant, role),
            )
            if variant is None:
                logger.debug(
                    "Skipping unresolved cart reference",
                    product_id=ref.product_id,
                    product_type_id=ref.product_type_id,
                    reason="variant",
                )
                continue

            lines.append(
                CartLineItem(
                    product_id=product.id,
                    title=product.title,
                    image_url=product.image_url,
                    price=variant.price,
                    product_type=variant.product_type.name,
                    product_type_id=variant.product_type_id,
                    quantity=ref.quantity,
                )
            )

        return ServiceResult.ok(lines)

    async def store_cart_items(
        self,
        references: list[CartItemReference],
        principal: Principal | None,
    ) -> ServiceResult[list[CartLineItem]]:
        """Store references in the caller's cart and return the whole cart.

        References for a product/type already in the cart increase its
        quantity.

        Args:
            references: Cart references to store.
            principal: Signed-in caller owning the cart.

        Returns:
            Result with the caller's full resolved cart.
        """
        try:
            user_id = self._require_identity(principal, "store_cart_items")
            for ref in references:
                self._validate_quantity(ref.quantity)
        except DomainError as e:
            return ServiceResult.fail(e)

        merged: dict[tuple[int, int], CartItemReference] = {}
        for ref in references:
            ref.user_id = user_id
            key = (ref.product_id, ref.product_type_id)
            if key in merged:
                merged[key].quantity += ref.quantity
            else:
                merged[key] = CartItemReference(
                    product_id=ref.product_id,
                    product_type_id=ref.product_type_id,
                    quantity=ref.quantity,
                    user_id=user_id,
                )

        new_items: list[CartItem] = []
        for ref in merged.values():
            existing = await self.repository.get_cart_item(
                user_id, ref.product_id, ref.product_type_id
            )
            if existing is not None:
                existing.quantity += ref.quantity
                continue
            new_items.append(
                CartItem(
                    user_id=user_id,
                    product_id=ref.product_id,
                    product_type_id=ref.product_type_id,
                    quantity=ref.quantity,
                )
            )

        await self.repository.save_cart_items(new_items)
        await self.session.commit()

        logger.info(
            "Cart items stored",
            user_id=user_id,
            received=len(references),
            inserted=len(new_items),
        )

        return await self._resolve_stored(user_id, principal)

    async def count_cart_items(self, principal: Principal | None) -> ServiceResult[int]:
        """Count stored cart rows of the caller, without catalog resolution.

        Args:
            principal: Signed-in caller.

        Returns:
            Result with the number of stored rows.
        """
        try:
            user_id = self._require_identity(principal, "count_cart_items")
        except DomainError as e:
            return ServiceResult.fail(e)

        return ServiceResult.ok(await self.repository.count_cart_items(user_id))

    async def get_db_cart_products(
        self,
        principal: Principal | None,
    ) -> ServiceResult[list[CartLineItem]]:
        """Resolve the caller's stored cart.

        Args:
            principal: Signed-in caller owning the cart.

        Returns:
            Result with the resolved stored cart.
        """
        try:
            user_id = self._require_identity(principal, "get_db_cart_products")
        except DomainError as e:
            return ServiceResult.fail(e)

        return await self._resolve_stored(user_id, principal)

    async def add_to_cart(
        self,
        reference: CartItemReference,
        principal: Principal | None,
    ) -> ServiceResult[bool]:
        """Add one reference to the caller's stored cart.

        Args:
            reference: Product/type and quantity to add.
            principal: Signed-in caller.

        Returns:
            Result with True.
        """
        try:
            user_id = self._require_identity(principal, "add_to_cart")
            self._validate_quantity(reference.quantity)
        except DomainError as e:
            return ServiceResult.fail(e)

        reference.user_id = user_id
        existing = await self.repository.get_cart_item(
            user_id, reference.product_id, reference.product_type_id
        )
        if existing is None:
            await self.repository.save_cart_items(
                [
                    CartItem(
                        user_id=user_id,
                        product_id=reference.product_id,
                        product_type_id=reference.product_type_id,
                        quantity=reference.quantity,
                    )
                ]
            )
        else:
            existing.quantity += reference.quantity

        await self.session.commit()

        return ServiceResult.ok(True)

    async def update_quantity(
        self,
        reference: CartItemReference,
        principal: Principal | None,
    ) -> ServiceResult[bool]:
        """Set the quantity of an item in the caller's stored cart.

        Args:
            reference: Product/type and the new quantity.
            principal: Signed-in caller.

        Returns:
            Result with True, or NOT_FOUND if the item is not in the cart.
        """
        try:
            user_id = self._require_identity(principal, "update_quantity")
            self._validate_quantity(reference.quantity)
            item = await self.repository.get_cart_item(
                user_id, reference.product_id, reference.product_type_id
            )
            if item is None:
                raise CartItemNotFoundError(reference.product_id, reference.product_type_id)
        except DomainError as e:
            return ServiceResult.fail(e)

        item.quantity = reference.quantity
        await self.session.commit()
        return ServiceResult.ok(True)

    async def remove_item_from_cart(
        self,
        product_id: int,
        product_type_id: int,
        principal: Principal | None,
    ) -> ServiceResult[bool]:
        """Remove an item from the caller's stored cart.

        Args:
            product_id: Product of the item.
            product_type_id: Product type of the item.
            principal: Signed-in caller.

        Returns:
            Result with True, or NOT_FOUND if the item is not in the cart.
        """
        try:
            user_id = self._require_identity(principal, "remove_item_from_cart")
            if not await self.repository.delete_cart_item(user_id, product_id, product_type_id):
                raise CartItemNotFoundError(product_id, product_type_id)
        except DomainError as e:
            return ServiceResult.fail(e)

        await self.session.commit()
        return ServiceResult.ok(True)

    async def _resolve_stored(
        self,
        user_id: int,
        principal: Principal | None,
    ) -> ServiceResult[list[CartLineItem]]:
        items = await self.repository.find_cart_items_by_owner(user_id)
        return await self.get_cart_products(
            [CartItemReference.from_cart_item(item) for item in items],
            principal,
        )

    @staticmethod
    def _require_identity(principal: Principal | None, operation: str) -> int:
        if principal is None or principal.id is None:
            raise UnauthenticatedError(operation)
        return principal.id

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if quantity < 1:
            raise InvalidQuantityError(quantity)
