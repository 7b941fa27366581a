from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

SortKey = Literal["name_asc", "price_asc", "price_desc", "newest"]


class CatalogFilters(BaseModel):
    """Filters for the product catalog, expressed in stored (pre-tax) terms."""
    category_id: Optional[int | list[int]] = Field(default=None, description="Category ID filter (single category or list of categories)")
    brand_id: Optional[int | list[int]] = Field(default=None, description="Brand ID filter (single brand or list of brands)")
    on_offer: bool = Field(default=False, description="Only products whose original price exceeds the current price")
    price_min: Optional[float] = Field(default=None, description="Minimum pre-tax price")
    price_max: Optional[float] = Field(default=None, description="Maximum pre-tax price")
    status: str = Field(default="Activo", description="Product status to include")


class CategoryFilters(BaseModel):
    """Filters for the category data."""
    top_level_only: bool = Field(default=False, description="Only categories without a parent")
    parent_id: Optional[int] = Field(default=None, description="Children of this category")
    status: str = Field(default="Activo", description="Category status to include")
    limit: Optional[int] = Field(default=None, description="Maximum number of categories")


class BrandFilters(BaseModel):
    """Filters for the brand data."""
    status: str = Field(default="Activo", description="Brand status to include")
    limit: Optional[int] = Field(default=None, description="Maximum number of brands")
