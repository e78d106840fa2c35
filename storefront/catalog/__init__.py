"""Product Catalog.

Provides catalog models, the store adapter, the visibility policy,
product browsing/administration and free-text search.
"""

from storefront.catalog.models import Category, CartItem, Product, ProductType, ProductVariant
from storefront.catalog.repository import CatalogRepository
from storefront.catalog.search import (
    PaginationParams,
    ProductSearchResult,
    SearchService,
    extract_suggestions,
)
from storefront.catalog.service import CatalogService, ProductData, VariantData
from storefront.catalog.visibility import eligibility_clause, is_eligible

__all__ = [
    # Models
    "Category",
    "CartItem",
    "Product",
    "ProductType",
    "ProductVariant",
    # Repository
    "CatalogRepository",
    # Visibility
    "eligibility_clause",
    "is_eligible",
    # Service
    "CatalogService",
    "ProductData",
    "VariantData",
    # Search
    "PaginationParams",
    "ProductSearchResult",
    "SearchService",
    "extract_suggestions",
]
