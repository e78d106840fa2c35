"""Product search and search suggestions.

Products match a search text when the text occurs, case-insensitively, in
the title or in the description, and the product is visible to shoppers
and not deleted. The visibility condition applies to both branches.
"""

import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog
from sqlalchemy import ColumnElement, and_, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Product, ProductVariant
from storefront.catalog.repository import CatalogRepository
from storefront.catalog.visibility import eligibility_clause
from storefront.domain.exceptions import DomainError, InvalidPageError, InvalidSearchTextError
from storefront.domain.principal import Role
from storefront.domain.results import ServiceResult
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = 2

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class ProductSearchResult:
    """One page of search results.

    Attributes:
        products: Products on the requested page.
        current_page: Requested page number.
        pages: Total number of pages.
    """

    products: list[Product] = field(default_factory=list)
    current_page: int = 1
    pages: int = 0


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total items (ceiling division)."""
    return (total + page_size - 1) // page_size


def match_clause(search_text: str) -> ColumnElement[bool]:
    """Build the search WHERE clause.

    Args:
        search_text: Text to look for.

    Returns:
        (title contains text OR description contains text) AND shopper-eligible.
    """
    # lower() folds non-ASCII letters on PostgreSQL; SQLite folds ASCII only.
    needle = search_text.lower()
    text_match = or_(
        func.lower(Product.title).contains(needle, autoescape=True),
        func.lower(Product.description).contains(needle, autoescape=True),
    )
    return and_(text_match, eligibility_clause(Product, Role.SHOPPER))


def _is_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def strip_punctuation(word: str) -> str:
    """Trim leading and trailing punctuation characters from a word."""
    start, end = 0, len(word)
    while start < end and _is_punctuation(word[start]):
        start += 1
    while end > start and _is_punctuation(word[end - 1]):
        end -= 1
    return word[start:end]


def extract_suggestions(products: Iterable[Product], search_text: str) -> list[str]:
    """Collect search suggestions from matching products.

    For each product in order, the full title is suggested when it contains
    the search text, followed by every description word (punctuation trimmed)
    that contains it. Suggestions are unique and keep first-seen order.

    Args:
        products: Matching products in store order.
        search_text: Text being searched.

    Returns:
        Suggestion strings.
    """
    needle = search_text.lower()
    suggestions: list[str] = []
    seen: set[str] = set()

    def add(candidate: str) -> None:
        if candidate and needle in candidate.lower() and candidate not in seen:
            seen.add(candidate)
            suggestions.append(candidate)

    for product in products:
        add(product.title)

        if product.description is None:
            continue
        for word in product.description.split():
            add(strip_punctuation(word))

    return suggestions


class SearchService:
    """Service for free-text product search.

    Example usage:
        async with async_session_factory() as session:
            service = SearchService(session)
            result = await service.search_products("shirt", page=2)
            suggestions = await service.get_search_suggestions("shi")
    """

    def __init__(self, session: AsyncSession, page_size: int | None = None) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
            page_size: Results per page, defaults to the configured size.
        """
        self.session = session
        self.repository = CatalogRepository(session)
        self.page_size = page_size or settings.search_page_size

    async def search_products(
        self,
        search_text: str,
        page: int = 1,
    ) -> ServiceResult[ProductSearchResult]:
        """Search products and return one page of matches.

        Args:
            search_text: Text to look for in title and description.
            page: Page number (1-indexed). Pages past the end are empty.

        Returns:
            Result with the page of products, current page and page count.
        """
        try:
            condition = self._condition(search_text)
            if page < 1:
                raise InvalidPageError(page)
        except DomainError as e:
            return ServiceResult.fail(e)

        pagination = PaginationParams(page=page, page_size=self.page_size)

        total = await self.repository.count_products(condition)
        products = await self.repository.find_products(
            condition,
            variant_condition=eligibility_clause(ProductVariant, Role.SHOPPER),
            include_product_type=True,
            limit=pagination.limit,
            offset=pagination.offset,
        )

        logger.debug(
            "Product search",
            search_text=search_text,
            page=page,
            total=total,
            returned=len(products),
        )

        return ServiceResult.ok(
            ProductSearchResult(
                products=list(products),
                current_page=page,
                pages=page_count(total, self.page_size),
            )
        )

    async def get_search_suggestions(self, search_text: str) -> ServiceResult[list[str]]:
        """Suggest titles and description words containing the search text.

        Args:
            search_text: Partial text typed by the shopper.

        Returns:
            Result with unique suggestions in discovery order.
        """
        try:
            condition = self._condition(search_text)
        except DomainError as e:
            return ServiceResult.fail(e)

        products = await self.repository.find_products(condition, include_variants=False)
        return ServiceResult.ok(extract_suggestions(products, search_text))

    def _condition(self, search_text: str) -> ColumnElement[bool]:
        if search_text is None or not search_text.strip():
            raise InvalidSearchTextError()
        return match_clause(search_text)
