from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from mundolar.formatting import parse_image_urls
from mundolar.pricing import discount_percent, display_price, is_on_offer, price_with_iva


class ProductResponse(BaseModel):
    """Response model for product data."""
    id: int = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    price: float = Field(description="Pre-tax product price")
    original_price: Optional[float] = Field(default=None, description="Pre-tax price before discount")
    price_with_iva: Optional[float] = Field(default=None, description="Stored tax-inclusive price")
    description: Optional[str] = Field(default=None, description="Free-text description")
    image_urls: List[str] = Field(default_factory=list, description="Product image URLs")
    category_id: Optional[int] = Field(default=None, description="Category reference")
    category_name: Optional[str] = Field(default=None, description="Joined category name")
    brand_id: Optional[int] = Field(default=None, description="Brand reference")
    brand_name: Optional[str] = Field(default=None, description="Joined brand name")
    status: Optional[str] = Field(default=None, description="Product status flag")
    sku: Optional[str] = Field(default=None, description="Stock keeping unit code")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")

    @field_validator("image_urls", mode="before")
    @classmethod
    def _parse_image_urls(cls, value: Any) -> List[str]:
        return parse_image_urls(value)

    @property
    def on_offer(self) -> bool:
        return is_on_offer(self.price, self.original_price)

    @property
    def display_price(self) -> int:
        return display_price(self.price, self.price_with_iva)

    @property
    def display_original_price(self) -> Optional[int]:
        """Tax-inclusive original price, only meaningful while on offer."""
        if not self.on_offer:
            return None
        return price_with_iva(self.original_price)

    @property
    def discount_percent(self) -> int:
        return discount_percent(self.price, self.original_price)

    @property
    def main_image(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None

    @property
    def display_sku(self) -> str:
        return self.sku or f"M-{self.id}"

    @property
    def is_active(self) -> bool:
        return self.status == "Activo"

    @classmethod
    def from_row(cls, row: dict) -> "ProductResponse":
        """Build from a backend row, flattening the ``brands``/``categories`` joins."""
        data = dict(row)
        brands = data.pop("brands", None)
        categories = data.pop("categories", None)
        if isinstance(brands, list):
            brands = brands[0] if brands else None
        if isinstance(categories, list):
            categories = categories[0] if categories else None
        if isinstance(brands, dict) and not data.get("brand_name"):
            data["brand_name"] = brands.get("name")
        if isinstance(categories, dict) and not data.get("category_name"):
            data["category_name"] = categories.get("name")
        if "image_urls" not in data and data.get("image_url"):
            data["image_urls"] = data.pop("image_url")
        return cls.model_validate(data)
