from __future__ import annotations

from typing import Any, List, Optional

from mundolar.logging import get_logger

from ..interface import DataAccess
from ..models import (
    BrandFilters, CatalogFilters, CategoryFilters, SortKey,
    BrandResponse, CategoryResponse, ProductResponse,
    CatalogPage, PriceBounds,
)

logger = get_logger(__name__)

ACTIVE = "Activo"

PRODUCT_COLUMNS = (
    "id, name, description, price, original_price, price_with_iva, status, "
    "image_urls, sku, created_at, category_id, brand_id, on_offer, brands (name), categories (name)"
)

# sort key -> (column, descending)
_SORT_ORDER = {
    "price_asc": ("price", False),
    "price_desc": ("price", True),
    "newest": ("created_at", True),
    "name_asc": ("name", False),
}


class SupabaseDataAccess(DataAccess):
    """
    Hosted implementation over the Supabase (PostgREST) client.
    - Queries are built only from filter/sort/range primitives.
    - Every call hits the database; nothing is cached here.
    - Failures are logged and turned into empty results.
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    # ---------- contract helpers ----------

    def _products(self, count: Optional[str] = None):
        if count:
            return self.client.table("products").select(PRODUCT_COLUMNS, count=count)
        return self.client.table("products").select(PRODUCT_COLUMNS)

    @staticmethod
    def _apply_catalog_filters(query, filters: CatalogFilters):
        query = query.eq("status", filters.status)
        if filters.category_id:
            if isinstance(filters.category_id, int):
                query = query.eq("category_id", filters.category_id)
            else:
                query = query.in_("category_id", list(filters.category_id))
        if filters.brand_id:
            if isinstance(filters.brand_id, int):
                query = query.eq("brand_id", filters.brand_id)
            else:
                query = query.in_("brand_id", list(filters.brand_id))
        if filters.on_offer:
            # generated column: original_price > price (supabase/migrations)
            query = query.eq("on_offer", True)
        if filters.price_min is not None:
            query = query.gte("price", filters.price_min)
        if filters.price_max is not None:
            query = query.lte("price", filters.price_max)
        return query

    @staticmethod
    def _to_products(rows: Optional[List[dict]]) -> List[ProductResponse]:
        return [ProductResponse.from_row(row) for row in rows or []]

    # ---------- interface implementation ----------

    def list_categories(self, filters: Optional[CategoryFilters] = None) -> List[CategoryResponse]:
        filters = filters or CategoryFilters()
        try:
            query = (
                self.client.table("categories")
                .select("id, name, description, image_url, parent_id, status, position")
                .eq("status", filters.status)
            )
            if filters.top_level_only:
                query = query.is_("parent_id", "null")
            if filters.parent_id is not None:
                query = query.eq("parent_id", filters.parent_id)
            query = query.order("position", desc=False, nullsfirst=False).order("name")
            if filters.limit is not None:
                query = query.limit(filters.limit)
            response = query.execute()
            return [CategoryResponse.model_validate(row) for row in response.data or []]
        except Exception as e:
            logger.error(f"Error fetching categories: {e}")
            return []

    def list_brands(self, filters: Optional[BrandFilters] = None) -> List[BrandResponse]:
        filters = filters or BrandFilters()
        try:
            query = (
                self.client.table("brands")
                .select("id, name, image_url, status, position")
                .eq("status", filters.status)
                .order("position", desc=False, nullsfirst=False)
                .order("name")
            )
            if filters.limit is not None:
                query = query.limit(filters.limit)
            response = query.execute()
            return [BrandResponse.model_validate(row) for row in response.data or []]
        except Exception as e:
            logger.error(f"Error fetching brands: {e}")
            return []

    def get_price_bounds(self) -> Optional[PriceBounds]:
        try:
            response = self.client.table("products").select("price").eq("status", ACTIVE).execute()
            prices = [float(row["price"]) for row in response.data or [] if row.get("price") is not None]
        except Exception as e:
            logger.error(f"Error fetching price range: {e}")
            return None
        if not prices:
            return None
        return PriceBounds(min_price=min(prices), max_price=max(prices))

    def get_catalog_page(
        self,
        filters: CatalogFilters,
        sort: SortKey = "name_asc",
        page: int = 1,
        page_size: int = 16,
    ) -> CatalogPage:
        column, descending = _SORT_ORDER.get(sort, _SORT_ORDER["name_asc"])
        offset = (page - 1) * page_size
        try:
            query = self._apply_catalog_filters(self._products(count="exact"), filters)
            response = (
                query.order(column, desc=descending)
                .range(offset, offset + page_size - 1)
                .execute()
            )
            return CatalogPage(
                items=self._to_products(response.data),
                total_count=response.count or 0,
                page=page,
                page_size=page_size,
            )
        except Exception as e:
            logger.error(f"Error fetching catalog page {page}: {e}")
            return CatalogPage.empty(page=page, page_size=page_size)

    def get_product(self, product_id: int) -> Optional[ProductResponse]:
        try:
            response = self._products().eq("id", product_id).limit(1).execute()
            products = self._to_products(response.data)
        except Exception as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            return None
        return products[0] if products else None

    def get_featured_products(self, limit: int = 12) -> List[ProductResponse]:
        try:
            response = (
                self._products()
                .eq("status", ACTIVE)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return self._to_products(response.data)
        except Exception as e:
            logger.error(f"Error fetching featured products: {e}")
            return []

    def get_related_products(self, product: ProductResponse, limit: int = 4) -> List[ProductResponse]:
        if product.category_id is None:
            return []
        try:
            response = (
                self._products()
                .eq("status", ACTIVE)
                .eq("category_id", product.category_id)
                .neq("id", product.id)
                .order("name")
                .limit(limit)
                .execute()
            )
            return self._to_products(response.data)
        except Exception as e:
            logger.error(f"Error fetching related products for {product.id}: {e}")
            return []
