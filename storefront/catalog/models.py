"""SQLAlchemy models for the storefront catalog.

Defines Category, ProductType, Product, ProductVariant and CartItem tables
for persistent storage.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.infrastructure.database import Base


class Category(Base):
    """Product category.

    Attributes:
        id: Category identifier.
        name: Display name.
        url: URL slug used to browse the category (matched case-insensitively).
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    url: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, url={self.url})>"


class ProductType(Base):
    """Shared variant dimension (e.g. "Paperback", "Small", "Red")."""

    __tablename__ = "product_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductType(id={self.id}, name={self.name})>"


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Product identifier.
        title: Product title.
        description: Product description.
        image_url: Product image URL.
        category_id: Owning category.
        visible: Whether shoppers can see the product.
        deleted: Soft-delete flag; deleted products are never served.
        featured: Whether the product is shown on the featured shelf.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category")
    variants: Mapped[list["ProductVariant"]] = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.product_type_id",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, title={self.title[:30]})>"


class ProductVariant(Base):
    """Priced variant of a product for one product type.

    A product owns at most one variant per product type, so the pair
    (product_id, product_type_id) identifies the variant.

    Attributes:
        product_id: Parent product ID.
        product_type_id: Product type of this variant.
        price: Current unit price.
        original_price: List price before discount (0 when not discounted).
        visible: Whether shoppers can see the variant.
        deleted: Soft-delete flag.
    """

    __tablename__ = "product_variants"

    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    product_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_types.id"),
        primary_key=True,
    )
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    original_price: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0.00")
    )
    visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="variants")
    product_type: Mapped["ProductType"] = relationship("ProductType")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ProductVariant(product_id={self.product_id}, "
            f"product_type_id={self.product_type_id}, price={self.price})>"
        )


class CartItem(Base):
    """Persisted cart reference owned by a user.

    Only stores shopper intent; product and variant are not foreign keys
    because a reference may outlive the catalog entry it points to.
    """

    __tablename__ = "cart_items"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_type_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CartItem(user_id={self.user_id}, product_id={self.product_id}, "
            f"product_type_id={self.product_type_id}, quantity={self.quantity})>"
        )
