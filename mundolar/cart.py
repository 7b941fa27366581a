"""Shopping cart mirrored to durable local storage.

The stored value under ``mundolar_cart`` is ``{"items": [...], "timestamp": ms}``.
It is rewritten on every mutation; a value older than the TTL is dropped on
load together with its storage key.
"""
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from pydantic import BaseModel, Field

from mundolar.formatting import parse_image_urls
from mundolar.logging import get_logger
from mundolar.pricing import display_price

logger = get_logger(__name__)

CART_STORAGE_KEY = "mundolar_cart"
DEFAULT_TTL_HOURS = 24


class CartItem(BaseModel):
    """One cart line."""
    id: int = Field(description="Product identifier")
    name: str = Field(description="Product name")
    price: float = Field(description="Pre-tax unit price")
    price_with_iva: Optional[float] = Field(default=None, description="Stored tax-inclusive unit price")
    image_url: str = Field(description="Display image")
    quantity: int = Field(default=1, ge=1, description="Units in the cart")
    brand_name: Optional[str] = Field(default=None, description="Brand shown in the cart")

    @property
    def unit_price(self) -> int:
        return display_price(self.price, self.price_with_iva)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


# ---- Local storage backends ----

class LocalStorage(Protocol):
    """Key/value string storage, shaped like the browser's localStorage."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage:
    """All keys kept in a single JSON object on disk. Last writer wins."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as e:
            logger.error(f"Corrupt local storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class SessionStorage:
    """Keys of one visitor session inside a shared storage."""

    def __init__(self, storage: LocalStorage, session_id: str) -> None:
        if not session_id:
            raise ValueError("session_id is required")
        self.storage = storage
        self.session_id = session_id

    def _key(self, key: str) -> str:
        return f"{self.session_id}:{key}"

    def get_item(self, key: str) -> Optional[str]:
        return self.storage.get_item(self._key(key))

    def set_item(self, key: str, value: str) -> None:
        self.storage.set_item(self._key(key), value)

    def remove_item(self, key: str) -> None:
        self.storage.remove_item(self._key(key))


def _now_ms() -> int:
    return int(time.time() * 1000)


# ---- Cart ----

class CartStore:
    """In-memory cart lines, persisted after every change."""

    def __init__(
        self,
        storage: LocalStorage,
        ttl_hours: int = DEFAULT_TTL_HOURS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.storage = storage
        self.ttl_ms = ttl_hours * 60 * 60 * 1000
        self.clock = clock
        self._items: List[CartItem] = []
        self.load()

    # ---------- persistence ----------

    def load(self) -> None:
        self._items = []
        saved = self.storage.get_item(CART_STORAGE_KEY)
        if not saved:
            return
        try:
            data = json.loads(saved)
            items = [CartItem.model_validate(item) for item in data["items"]]
            timestamp = int(data["timestamp"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Error parsing cart from local storage: {e}")
            return

        if self.clock() - timestamp < self.ttl_ms:
            self._items = items
        else:
            logger.info("Stored cart expired, clearing it")
            self.storage.remove_item(CART_STORAGE_KEY)

    def _save(self) -> None:
        payload = {
            "items": [item.model_dump() for item in self._items],
            "timestamp": self.clock(),
        }
        self.storage.set_item(CART_STORAGE_KEY, json.dumps(payload, ensure_ascii=False))

    # ---------- mutations ----------

    def add(self, product: Any) -> CartItem:
        """Add one unit of ``product`` (a ProductResponse or a product row)."""
        data = product.model_dump() if isinstance(product, BaseModel) else dict(product)
        product_id = int(data["id"])

        for item in self._items:
            if item.id == product_id:
                item.quantity += 1
                self._save()
                return item

        images = parse_image_urls(data.get("image_urls") or data.get("image_url"))
        brand_name = data.get("brand_name")
        if not brand_name:
            brands = data.get("brands")
            if isinstance(brands, list):
                brands = brands[0] if brands else None
            brand_name = brands.get("name") if isinstance(brands, dict) else None

        item = CartItem(
            id=product_id,
            name=data["name"],
            price=data["price"],
            price_with_iva=data.get("price_with_iva"),
            image_url=images[0] if images else f"https://picsum.photos/400/300?random={product_id}",
            quantity=1,
            brand_name=brand_name or "Marca",
        )
        self._items.append(item)
        self._save()
        return item

    def remove(self, product_id: int) -> None:
        self._items = [item for item in self._items if item.id != product_id]
        self._save()

    def update_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        for item in self._items:
            if item.id == product_id:
                item.quantity = quantity
        self._save()

    def clear(self) -> None:
        self._items = []
        self._save()

    # ---------- derived values ----------

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def total(self) -> int:
        return sum(item.line_total for item in self._items)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def __len__(self) -> int:
        return len(self._items)
