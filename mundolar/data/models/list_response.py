from __future__ import annotations

from math import ceil
from typing import List

from pydantic import BaseModel, Field

from .products import ProductResponse


class PriceBounds(BaseModel):
    """Lowest and highest pre-tax price among active products."""
    min_price: float = Field(description="Lowest pre-tax price")
    max_price: float = Field(description="Highest pre-tax price")


class CatalogPage(BaseModel):
    """One page of catalog results plus the total match count."""
    items: List[ProductResponse] = Field(default_factory=list, description="Products on this page")
    total_count: int = Field(default=0, description="Number of matching products across all pages")
    page: int = Field(default=1, description="1-based page number")
    page_size: int = Field(default=16, description="Products per page")

    @property
    def page_count(self) -> int:
        return max(1, ceil(self.total_count / self.page_size))

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @classmethod
    def empty(cls, page: int = 1, page_size: int = 16) -> "CatalogPage":
        return cls(items=[], total_count=0, page=page, page_size=page_size)
