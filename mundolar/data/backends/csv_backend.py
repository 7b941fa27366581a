from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pandas as pd

from mundolar.config import get_config
from mundolar.logging import get_logger

from ..interface import DataAccess
from ..models import (
    BrandFilters, CatalogFilters, CategoryFilters, SortKey,
    BrandResponse, CategoryResponse, ProductResponse,
    CatalogPage, PriceBounds,
)

logger = get_logger(__name__)

ACTIVE = "Activo"

_SORT_COLUMNS = {
    "price_asc": ("price", True),
    "price_desc": ("price", False),
    "newest": ("created_at", False),
    "name_asc": ("name", True),
}


@dataclass
class _Tables:
    categories: pd.DataFrame
    brands: pd.DataFrame
    # Products with brand_name / category_name already joined in
    products: pd.DataFrame


def _records(df: pd.DataFrame) -> List[dict]:
    """Rows as plain dicts with NaN/NaT turned into None."""
    if df.empty:
        return []
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


def _by_position(df: pd.DataFrame) -> pd.DataFrame:
    return df.sort_values(["position", "name"], ascending=[True, True], na_position="last")


class CsvDataAccess(DataAccess):
    """
    CSV-backed implementation for local development.
    - Loads CSVs from `data_dir` once at construction.
    - Every method call performs a fresh filter/sort pass over the loaded frames,
      mirroring the query the hosted backend would run.
    """

    def __init__(self, data_dir: str | Path = None) -> None:
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            self.data_dir = (repo_root or current) / self.data_dir

        self._tables = self._load_tables(self.data_dir)

    # ---------- loading / join helpers ----------

    @staticmethod
    def _load_tables(data_dir: Path) -> _Tables:
        if not data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m mundolar.seed_data\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory\n"
                f"  3. Create a .env file with DATA_DIR=/path/to/your/data"
            )

        required_files = ["products.csv", "categories.csv", "brands.csv"]
        missing_files = [f for f in required_files if not (data_dir / f).exists()]

        if missing_files:
            raise FileNotFoundError(
                f"Required CSV files missing in {data_dir}:\n"
                f"  Missing: {', '.join(missing_files)}\n"
                f"  Expected files: {', '.join(required_files)}\n\n"
                f"Generate them with: python -m mundolar.seed_data"
            )

        try:
            products = pd.read_csv(data_dir / "products.csv", parse_dates=["created_at"])
            categories = pd.read_csv(data_dir / "categories.csv")
            brands = pd.read_csv(data_dir / "brands.csv")
        except Exception as e:
            raise RuntimeError(
                f"Error reading CSV files from {data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        return _Tables(
            categories=categories,
            brands=brands,
            products=CsvDataAccess._join_products(products, categories, brands),
        )

    @staticmethod
    def _join_products(products: pd.DataFrame, categories: pd.DataFrame, brands: pd.DataFrame) -> pd.DataFrame:
        df = (
            products.merge(
                brands[["id", "name"]].rename(columns={"id": "brand_id", "name": "brand_name"}),
                on="brand_id", how="left",
            )
            .merge(
                categories[["id", "name"]].rename(columns={"id": "category_id", "name": "category_name"}),
                on="category_id", how="left",
            )
            .copy()
        )
        df["price"] = df["price"].astype(float)
        df["original_price"] = df["original_price"].astype(float)
        return df

    # ---------- contract helpers ----------

    def _active_products(self) -> pd.DataFrame:
        df = self._tables.products
        return df[df["status"] == ACTIVE]

    @staticmethod
    def _to_products(df: pd.DataFrame) -> List[ProductResponse]:
        return [ProductResponse.from_row(row) for row in _records(df)]

    # ---------- interface implementation ----------

    def list_categories(self, filters: Optional[CategoryFilters] = None) -> List[CategoryResponse]:
        filters = filters or CategoryFilters()
        df = self._tables.categories
        if df.empty:
            return []

        df = df[df["status"] == filters.status]
        if filters.top_level_only:
            df = df[df["parent_id"].isna()]
        if filters.parent_id is not None:
            df = df[df["parent_id"] == filters.parent_id]

        df = _by_position(df)
        if filters.limit is not None:
            df = df.head(int(filters.limit))
        return [CategoryResponse.model_validate(row) for row in _records(df)]

    def list_brands(self, filters: Optional[BrandFilters] = None) -> List[BrandResponse]:
        filters = filters or BrandFilters()
        df = self._tables.brands
        if df.empty:
            return []

        df = _by_position(df[df["status"] == filters.status])
        if filters.limit is not None:
            df = df.head(int(filters.limit))
        return [BrandResponse.model_validate(row) for row in _records(df)]

    def get_price_bounds(self) -> Optional[PriceBounds]:
        prices = self._active_products()["price"].dropna()
        if prices.empty:
            return None
        return PriceBounds(min_price=float(prices.min()), max_price=float(prices.max()))

    def get_catalog_page(
        self,
        filters: CatalogFilters,
        sort: SortKey = "name_asc",
        page: int = 1,
        page_size: int = 16,
    ) -> CatalogPage:
        try:
            df = self._tables.products
            df = df[df["status"] == filters.status]

            if filters.category_id:
                if isinstance(filters.category_id, int):
                    df = df[df["category_id"] == filters.category_id]
                else:
                    df = df[df["category_id"].isin(filters.category_id)]
            if filters.brand_id:
                if isinstance(filters.brand_id, int):
                    df = df[df["brand_id"] == filters.brand_id]
                else:
                    df = df[df["brand_id"].isin(filters.brand_id)]
            if filters.on_offer:
                df = df[df["original_price"].notna() & (df["original_price"] > df["price"])]
            if filters.price_min is not None:
                df = df[df["price"] >= filters.price_min]
            if filters.price_max is not None:
                df = df[df["price"] <= filters.price_max]

            column, ascending = _SORT_COLUMNS.get(sort, _SORT_COLUMNS["name_asc"])
            df = df.sort_values(column, ascending=ascending, na_position="last", kind="stable")

            offset = (page - 1) * page_size
            rows = df.iloc[offset:offset + page_size]

            return CatalogPage(
                items=self._to_products(rows),
                total_count=len(df),
                page=page,
                page_size=page_size,
            )
        except Exception as e:
            logger.error(f"Error fetching catalog page {page}: {e}")
            return CatalogPage.empty(page=page, page_size=page_size)

    def get_product(self, product_id: int) -> Optional[ProductResponse]:
        df = self._tables.products
        match = df[df["id"] == product_id]
        if match.empty:
            return None
        return self._to_products(match.head(1))[0]

    def get_featured_products(self, limit: int = 12) -> List[ProductResponse]:
        df = self._active_products().sort_values("created_at", ascending=False, na_position="last")
        return self._to_products(df.head(int(limit)))

    def get_related_products(self, product: ProductResponse, limit: int = 4) -> List[ProductResponse]:
        if product.category_id is None:
            return []
        df = self._active_products()
        df = df[(df["category_id"] == product.category_id) & (df["id"] != product.id)]
        return self._to_products(df.sort_values("name").head(int(limit)))
