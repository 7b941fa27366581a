"""Translate catalog URL query parameters into backend filters.

Prices in the URL are the tax-inclusive amounts a customer sees; the data
store holds pre-tax prices, so bounds are divided by the IVA multiplier
before they reach a backend.
"""
from __future__ import annotations

from math import ceil
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from mundolar.pricing import pre_tax

from .models import CatalogFilters, SortKey

PAGE_SIZE = 16

SORT_OPTIONS: Dict[str, str] = {
    "name_asc": "Relevancia",
    "price_asc": "Precio: Bajo a Alto",
    "price_desc": "Precio: Alto a Bajo",
    "newest": "Más nuevos",
}

_TRUTHY = {"1", "true", "si", "sí", "yes", "on"}


def _values(params: Mapping[str, Any], key: str) -> List[str]:
    """All values for ``key``; accepts repeated params and comma-separated lists."""
    getter = getattr(params, "get_all", None) or getattr(params, "getlist", None)
    raw = getter(key) if getter is not None else params.get(key)
    if raw is None:
        return []
    if isinstance(raw, (str, int, float)):
        raw = [raw]
    out: List[str] = []
    for item in raw:
        out.extend(part.strip() for part in str(item).split(",") if part.strip())
    return out


def _first(params: Mapping[str, Any], key: str) -> Optional[str]:
    values = _values(params, key)
    return values[0] if values else None


def _int_set(values: Iterable[str]) -> List[int]:
    ids: List[int] = []
    for value in values:
        try:
            number = int(value)
        except ValueError:
            continue
        if number not in ids:
            ids.append(number)
    return ids


def _float_or_none(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if number != number or number < 0:
        return None
    return number


def _number_param(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class CatalogQuery(BaseModel):
    """Catalog state as carried in the URL query string."""
    category_ids: List[int] = Field(default_factory=list, description="Selected categories (?categoria=)")
    brand_ids: List[int] = Field(default_factory=list, description="Selected brands (?marca=)")
    on_offer: bool = Field(default=False, description="Offer-only flag (?oferta=1)")
    min_price: Optional[float] = Field(default=None, description="Tax-inclusive minimum (?minPrice=)")
    max_price: Optional[float] = Field(default=None, description="Tax-inclusive maximum (?maxPrice=)")
    sort: SortKey = Field(default="name_asc", description="Sort key (?sort=)")
    page: int = Field(default=1, description="1-based page number (?page=)")
    page_size: int = Field(default=PAGE_SIZE, description="Products per page")

    @classmethod
    def from_params(cls, params: Mapping[str, Any], page_size: int = PAGE_SIZE) -> "CatalogQuery":
        sort = _first(params, "sort") or "name_asc"
        if sort not in SORT_OPTIONS:
            sort = "name_asc"

        try:
            page = int(_first(params, "page") or 1)
        except ValueError:
            page = 1

        return cls(
            category_ids=_int_set(_values(params, "categoria")),
            brand_ids=_int_set(_values(params, "marca")),
            on_offer=(_first(params, "oferta") or "").lower() in _TRUTHY,
            min_price=_float_or_none(_first(params, "minPrice")),
            max_price=_float_or_none(_first(params, "maxPrice")),
            sort=sort,
            page=max(1, page),
            page_size=page_size,
        )

    @property
    def pre_tax_min(self) -> Optional[float]:
        return float(pre_tax(self.min_price)) if self.min_price is not None else None

    @property
    def pre_tax_max(self) -> Optional[float]:
        return float(pre_tax(self.max_price)) if self.max_price is not None else None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def range_end(self) -> int:
        """Inclusive index of the last row on this page."""
        return self.offset + self.page_size - 1

    def page_count(self, total_count: int) -> int:
        return max(1, ceil(total_count / self.page_size))

    def to_filters(self) -> CatalogFilters:
        return CatalogFilters(
            category_id=self.category_ids or None,
            brand_id=self.brand_ids or None,
            on_offer=self.on_offer,
            price_min=self.pre_tax_min,
            price_max=self.pre_tax_max,
        )

    def to_params(self, **overrides: Any) -> Dict[str, str]:
        """Query string for this state, e.g. to link to another page."""
        state = self.model_copy(update=overrides)
        params: Dict[str, str] = {}
        if state.category_ids:
            params["categoria"] = ",".join(str(i) for i in state.category_ids)
        if state.brand_ids:
            params["marca"] = ",".join(str(i) for i in state.brand_ids)
        if state.on_offer:
            params["oferta"] = "1"
        if state.min_price is not None:
            params["minPrice"] = _number_param(state.min_price)
        if state.max_price is not None:
            params["maxPrice"] = _number_param(state.max_price)
        if state.sort != "name_asc":
            params["sort"] = state.sort
        if state.page > 1:
            params["page"] = str(state.page)
        return params
