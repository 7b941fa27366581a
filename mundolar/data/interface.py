from __future__ import annotations

from typing import List, Optional, Protocol

from .models import (
    # Filter classes
    BrandFilters,
    CatalogFilters,
    CategoryFilters,
    SortKey,
    # Response models
    BrandResponse,
    CategoryResponse,
    ProductResponse,
    # List response models
    CatalogPage,
    PriceBounds,
)


# ---- Data access protocol ----

class DataAccess(Protocol):
    """
    Backend-agnostic contract for the storefront UI.

    Error policy:
    - Implementations catch backend failures, log them and return an empty
      result (empty list, empty page with zero count, or None) so a page can
      always render.
    - Prices passed in filters are pre-tax, matching what the store holds.
    """

    # Queries to populate the home page and the catalog sidebar

    def list_categories(self, filters: Optional[CategoryFilters] = None) -> List[CategoryResponse]:
        """List categories ordered by position (nulls last), then name."""
        ...

    def list_brands(self, filters: Optional[BrandFilters] = None) -> List[BrandResponse]:
        """List brands ordered by position (nulls last), then name."""
        ...

    def get_price_bounds(self) -> Optional[PriceBounds]:
        """Get the lowest and highest pre-tax price among active products."""
        ...

    # Product data queries

    def get_catalog_page(
        self,
        filters: CatalogFilters,
        sort: SortKey = "name_asc",
        page: int = 1,
        page_size: int = 16,
    ) -> CatalogPage:
        """Get one page of active products plus the total match count."""
        ...

    def get_product(self, product_id: int) -> Optional[ProductResponse]:
        """Get a single product by id, or None when missing."""
        ...

    def get_featured_products(self, limit: int = 12) -> List[ProductResponse]:
        """Get the newest active products."""
        ...

    def get_related_products(self, product: ProductResponse, limit: int = 4) -> List[ProductResponse]:
        """Get other active products of the same category."""
        ...
