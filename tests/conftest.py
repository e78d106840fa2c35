"""Shared fixtures: in-memory database, seeded catalog and API client."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from storefront.api.principal import encode_principal
from storefront.catalog.models import Category, Product, ProductType, ProductVariant
from storefront.domain.principal import Principal, Role
from storefront.infrastructure.database import Base, get_session
from storefront.main import app


@dataclass
class SeededCatalog:
    """IDs of the records created by the ``catalog`` fixture."""

    shirts: int
    books: int
    default_type: int
    small_type: int
    large_type: int
    red_shirt: int
    blue_shirt: int
    green_shirt: int
    old_shirt: int
    yellow_shirt: int
    plain_tee: int
    shirtless_summer: int
    cookbook: int


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for service-level tests."""
    async with session_factory() as session:
        yield session


def _variant(product_type: ProductType, price: str, **flags: bool) -> ProductVariant:
    return ProductVariant(
        product_type=product_type,
        price=Decimal(price),
        original_price=Decimal("0.00"),
        visible=flags.get("visible", True),
        deleted=flags.get("deleted", False),
    )


@pytest_asyncio.fixture
async def catalog(session_factory: async_sessionmaker[AsyncSession]) -> SeededCatalog:
    """Seed a small catalog covering every visibility combination.

    Products, in store order:
        Red Shirt         visible, featured; Default deleted, Small visible, Large hidden
        Blue Shirt        visible
        Green Shirt       hidden
        Old Shirt         deleted
        Yellow Shirt      visible, no description
        Plain Tee         visible, "shirt" only in the description
        Shirtless Summer  visible, books
        Cookbook          visible, featured, books, no "shirt" anywhere
    """
    async with session_factory() as session:
        shirts = Category(name="Shirts", url="shirts")
        books = Category(name="Books", url="books")
        default = ProductType(name="Default")
        small = ProductType(name="Small")
        large = ProductType(name="Large")
        session.add_all([shirts, books, default, small, large])
        await session.flush()

        products = [
            Product(
                title="Red Shirt",
                description="A bright red shirt.",
                category=shirts,
                featured=True,
                variants=[
                    _variant(default, "9.00", deleted=True),
                    _variant(small, "10.00"),
                    _variant(large, "12.50", visible=False),
                ],
            ),
            Product(
                title="Blue Shirt",
                description="Soft cotton shirt, machine-washable.",
                category=shirts,
                variants=[_variant(default, "15.00")],
            ),
            Product(
                title="Green Shirt",
                description="Not released yet.",
                category=shirts,
                visible=False,
                variants=[_variant(default, "11.00")],
            ),
            Product(
                title="Old Shirt",
                description="Discontinued shirt.",
                category=shirts,
                deleted=True,
                variants=[_variant(default, "5.00")],
            ),
            Product(
                title="Yellow Shirt",
                description=None,
                category=shirts,
                variants=[_variant(default, "8.00")],
            ),
            Product(
                title="Plain Tee",
                description="Goes well under any shirt!",
                category=shirts,
                variants=[_variant(default, "7.00")],
            ),
            Product(
                title="Shirtless Summer",
                description="A novel about a long hot summer.",
                category=books,
                variants=[_variant(default, "20.00")],
            ),
            Product(
                title="Cookbook",
                description="Recipes for every season.",
                category=books,
                featured=True,
                variants=[_variant(default, "25.00")],
            ),
        ]
        session.add_all(products)
        await session.commit()

        return SeededCatalog(
            shirts=shirts.id,
            books=books.id,
            default_type=default.id,
            small_type=small.id,
            large_type=large.id,
            red_shirt=products[0].id,
            blue_shirt=products[1].id,
            green_shirt=products[2].id,
            old_shirt=products[3].id,
            yellow_shirt=products[4].id,
            plain_tee=products[5].id,
            shirtless_summer=products[6].id,
            cookbook=products[7].id,
        )


@pytest.fixture
def shopper() -> Principal:
    """Signed-in shopper."""
    return Principal(id=7, role=Role.SHOPPER)


@pytest.fixture
def admin() -> Principal:
    """Signed-in admin."""
    return Principal(id=1, role=Role.ADMIN)


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """API client whose requests use the test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def bearer(user_id: int, role: Role = Role.SHOPPER) -> dict[str, str]:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {encode_principal(user_id, role)}"}


@pytest.fixture
def shopper_headers(shopper: Principal) -> dict[str, str]:
    """Authorization header of the shopper fixture."""
    return bearer(shopper.id, shopper.role)


@pytest.fixture
def admin_headers(admin: Principal) -> dict[str, str]:
    """Authorization header of the admin fixture."""
    return bearer(admin.id, admin.role)
