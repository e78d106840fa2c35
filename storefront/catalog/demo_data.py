"""Demo catalog used to seed development databases.

Builds a small book/movie/game catalog with shared product types, a
hidden product and a few featured ones.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.catalog.models import Category, Product, ProductType, ProductVariant

CATEGORIES: list[tuple[str, str]] = [
    ("Books", "books"),
    ("Movies", "movies"),
    ("Video Games", "video-games"),
]

PRODUCT_TYPES: list[str] = [
    "Default",
    "Paperback",
    "E-Book",
    "Audiobook",
    "Stream",
    "Blu-ray",
    "DVD",
    "PC",
    "PlayStation",
    "Xbox",
]

# (title, description, category url, featured, visible, variants)
# variants: (product type name, price, original price)
PRODUCTS: list[tuple[str, str, str, bool, bool, list[tuple[str, str, str]]]] = [
    (
        "The Hitchhiker's Guide to the Galaxy",
        "A comedy science fiction series: the last surviving man, Arthur Dent, "
        "follows his friend Ford Prefect across the galaxy.",
        "books",
        True,
        True,
        [("Paperback", "7.99", "14.99"), ("E-Book", "3.99", "0"), ("Audiobook", "19.99", "29.99")],
    ),
    (
        "Ready Player One",
        "A 2011 science fiction novel. Wade Watts hunts for an easter egg "
        "hidden inside a virtual-reality world.",
        "books",
        False,
        True,
        [("Paperback", "7.99", "19.99"), ("E-Book", "7.99", "0")],
    ),
    (
        "Nineteen Eighty-Four",
        "A dystopian social science fiction novel; Big Brother is watching.",
        "books",
        False,
        True,
        [("Paperback", "6.99", "0")],
    ),
    (
        "The Matrix",
        "A 1999 science fiction action film. A hacker learns that reality "
        "is a simulation.",
        "movies",
        True,
        True,
        [("Stream", "3.99", "0"), ("Blu-ray", "9.99", "0"), ("DVD", "5.99", "0")],
    ),
    (
        "Back to the Future",
        "A 1985 science fiction film: Marty McFly travels back in time.",
        "movies",
        False,
        True,
        [("Stream", "3.99", "0"), ("Blu-ray", "9.99", "0")],
    ),
    (
        "Toy Story",
        "A 1995 animated comedy film; toys come to life when humans are away.",
        "movies",
        False,
        False,
        [("Stream", "2.99", "0")],
    ),
    (
        "Half-Life 2",
        "A 2004 first-person shooter. Gordon Freeman fights the Combine.",
        "video-games",
        True,
        True,
        [("PC", "9.99", "19.99"), ("Xbox", "19.99", "0")],
    ),
    (
        "Day of the Tentacle",
        "A 1993 graphic adventure game: time-travel, tentacles, and puzzles.",
        "video-games",
        False,
        True,
        [("PC", "14.99", "0")],
    ),
]


@dataclass
class DemoCatalog:
    """Unsaved demo records.

    Attributes:
        categories: Categories by URL slug.
        product_types: Product types by name.
        products: Products with their variants attached.
    """

    categories: dict[str, Category] = field(default_factory=dict)
    product_types: dict[str, ProductType] = field(default_factory=dict)
    products: list[Product] = field(default_factory=list)

    @property
    def variant_count(self) -> int:
        """Number of variants across all products."""
        return sum(len(p.variants) for p in self.products)


def build_demo_catalog() -> DemoCatalog:
    """Build the demo catalog as unsaved ORM objects.

    Returns:
        Demo catalog ready to be added to a session.
    """
    catalog = DemoCatalog()

    for name, url in CATEGORIES:
        catalog.categories[url] = Category(name=name, url=url)

    for name in PRODUCT_TYPES:
        catalog.product_types[name] = ProductType(name=name)

    for title, description, category_url, featured, visible, variants in PRODUCTS:
        product = Product(
            title=title,
            description=description,
            category=catalog.categories[category_url],
            featured=featured,
            visible=visible,
            deleted=False,
            image_url=None,
        )
        for type_name, price, original_price in variants:
            product.variants.append(
                ProductVariant(
                    product_type=catalog.product_types[type_name],
                    price=Decimal(price),
                    original_price=Decimal(original_price),
                    visible=True,
                    deleted=False,
                )
            )
        catalog.products.append(product)

    return catalog
