"""Tests for the visibility policy."""

from types import SimpleNamespace

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Product, ProductVariant
from storefront.catalog.visibility import (
    eligibility_clause,
    is_eligible,
    is_eligible_for,
    not_deleted_clause,
)
from storefront.domain.principal import Principal, Role


def flagged(visible: bool, deleted: bool) -> SimpleNamespace:
    """Create a record carrying only visibility flags."""
    return SimpleNamespace(visible=visible, deleted=deleted)


class TestIsEligible:
    """Truth table of the policy predicate."""

    @pytest.mark.parametrize(
        ("visible", "deleted", "role", "expected"),
        [
            (True, False, Role.SHOPPER, True),
            (False, False, Role.SHOPPER, False),
            (True, True, Role.SHOPPER, False),
            (False, True, Role.SHOPPER, False),
            (True, False, Role.ADMIN, True),
            (False, False, Role.ADMIN, True),
            (True, True, Role.ADMIN, False),
            (False, True, Role.ADMIN, False),
        ],
    )
    def test_truth_table(
        self, visible: bool, deleted: bool, role: Role, expected: bool
    ) -> None:
        """Deleted is never eligible; admins ignore the visible flag."""
        assert is_eligible(flagged(visible, deleted), role) is expected

    def test_missing_role_is_shopper(self) -> None:
        """A None role is treated like a shopper."""
        assert is_eligible(flagged(False, False), None) is False
        assert is_eligible(flagged(True, False), None) is True

    def test_eligible_for_principal(self) -> None:
        """Principal-based check uses the principal's role."""
        hidden = flagged(False, False)
        assert is_eligible_for(hidden, Principal(id=1, role=Role.ADMIN))
        assert not is_eligible_for(hidden, Principal(id=2))
        assert not is_eligible_for(hidden, None)


class TestEligibilityClause:
    """The SQL rendering selects the same records as the predicate."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.SHOPPER, Role.ADMIN])
    async def test_products_match_predicate(
        self, session: AsyncSession, catalog, role: Role
    ) -> None:
        """Filtered product ids equal the predicate applied in Python."""
        everything = (await session.execute(select(Product))).scalars().all()
        expected = {p.id for p in everything if is_eligible(p, role)}

        query = select(Product.id).where(eligibility_clause(Product, role))
        selected = set((await session.execute(query)).scalars().all())

        assert selected == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.SHOPPER, Role.ADMIN])
    async def test_variants_match_predicate(
        self, session: AsyncSession, catalog, role: Role
    ) -> None:
        """Filtered variant keys equal the predicate applied in Python."""
        everything = (await session.execute(select(ProductVariant))).scalars().all()
        expected = {
            (v.product_id, v.product_type_id) for v in everything if is_eligible(v, role)
        }

        query = select(ProductVariant).where(eligibility_clause(ProductVariant, role))
        selected = {
            (v.product_id, v.product_type_id)
            for v in (await session.execute(query)).scalars().all()
        }

        assert selected == expected

    @pytest.mark.asyncio
    async def test_not_deleted_clause_keeps_hidden(self, session: AsyncSession, catalog) -> None:
        """The admin clause keeps hidden products and drops deleted ones."""
        query = select(Product.id).where(not_deleted_clause(Product))
        ids = set((await session.execute(query)).scalars().all())

        assert catalog.green_shirt in ids
        assert catalog.old_shirt not in ids
