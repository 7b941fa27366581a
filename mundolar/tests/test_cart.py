import json

import pytest

from mundolar.cart import CART_STORAGE_KEY, CartStore, JsonFileStorage, MemoryStorage, SessionStorage
from mundolar.data.models import ProductResponse

HOUR_MS = 60 * 60 * 1000

class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def radio():
    return ProductResponse(
        id=7, name="Radio Hytera HP705", price=1000, original_price=None,
        image_urls=["https://img/hp705.webp"], brand_name="Hytera",
    )

def test_add_same_product_twice_increments_quantity(clock, radio):
    cart = CartStore(MemoryStorage(), clock=clock)
    cart.add(radio)
    cart.add(radio)
    assert len(cart) == 1
    assert cart.items[0].quantity == 2
    assert cart.count == 2

def test_add_snapshot_fields(clock, radio):
    cart = CartStore(MemoryStorage(), clock=clock)
    item = cart.add(radio)
    assert item.image_url == "https://img/hp705.webp"
    assert item.brand_name == "Hytera"
    assert item.unit_price == 1500

def test_add_raw_row_with_joined_brand_and_no_image(clock):
    cart = CartStore(MemoryStorage(), clock=clock)
    item = cart.add({"id": 3, "name": "Antena", "price": 5000, "brands": {"name": "Kenwood"}})
    assert item.brand_name == "Kenwood"
    assert item.image_url == "https://picsum.photos/400/300?random=3"

    item = cart.add({"id": 4, "name": "Clip", "price": 5000, "brands": None})
    assert item.brand_name == "Marca"

def test_total_uses_stored_price_with_iva_then_fallback(clock):
    cart = CartStore(MemoryStorage(), clock=clock)
    cart.add({"id": 1, "name": "A", "price": 1000, "price_with_iva": 1785})
    cart.add({"id": 2, "name": "B", "price": 5000})
    cart.add({"id": 2, "name": "B", "price": 5000})
    assert cart.total == 1785 + 2 * 6000

def test_update_quantity(clock, radio):
    cart = CartStore(MemoryStorage(), clock=clock)
    cart.add(radio)
    cart.update_quantity(7, 5)
    assert cart.items[0].quantity == 5
    cart.update_quantity(7, 0)
    assert cart.items == []

def test_remove_and_clear(clock, radio):
    cart = CartStore(MemoryStorage(), clock=clock)
    cart.add(radio)
    cart.add({"id": 8, "name": "Batería", "price": 90000})
    cart.remove(7)
    assert [i.id for i in cart.items] == [8]
    cart.clear()
    assert cart.items == []
    assert cart.total == 0

def test_mutations_are_persisted(clock, radio):
    storage = MemoryStorage()
    cart = CartStore(storage, clock=clock)
    cart.add(radio)
    saved = json.loads(storage.get_item(CART_STORAGE_KEY))
    assert saved["timestamp"] == clock.now
    assert saved["items"][0]["id"] == 7

    reloaded = CartStore(storage, clock=clock)
    assert reloaded.items[0].name == "Radio Hytera HP705"

def test_cart_within_ttl_is_restored(clock, radio):
    storage = MemoryStorage()
    CartStore(storage, clock=clock).add(radio)
    clock.now += 23 * HOUR_MS
    assert len(CartStore(storage, clock=clock)) == 1

def test_expired_cart_is_dropped_and_key_removed(clock, radio):
    storage = MemoryStorage()
    CartStore(storage, clock=clock).add(radio)
    clock.now += 24 * HOUR_MS
    cart = CartStore(storage, clock=clock)
    assert cart.items == []
    assert storage.get_item(CART_STORAGE_KEY) is None

def test_corrupt_storage_starts_empty(clock):
    storage = MemoryStorage()
    storage.set_item(CART_STORAGE_KEY, "{not json")
    assert CartStore(storage, clock=clock).items == []

def test_json_file_storage(tmp_path, clock, radio):
    path = tmp_path / "state" / "local_storage.json"
    storage = JsonFileStorage(path)
    storage.set_item("other", "kept")
    CartStore(storage, clock=clock).add(radio)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["other"] == "kept"
    assert CART_STORAGE_KEY in data

    storage.remove_item(CART_STORAGE_KEY)
    assert JsonFileStorage(path).get_item(CART_STORAGE_KEY) is None
    assert JsonFileStorage(path).get_item("other") == "kept"

def test_session_storage_keeps_carts_apart(clock, radio):
    shared = MemoryStorage()
    first = CartStore(SessionStorage(shared, "a" * 32), clock=clock)
    first.add(radio)

    second = CartStore(SessionStorage(shared, "b" * 32), clock=clock)
    assert second.items == []
    second.add({"id": 8, "name": "Batería", "price": 90000})

    assert [i.id for i in CartStore(SessionStorage(shared, "a" * 32), clock=clock).items] == [7]
    assert shared.get_item(CART_STORAGE_KEY) is None
    assert shared.get_item(f"{'a' * 32}:{CART_STORAGE_KEY}") is not None

def test_session_storage_requires_id():
    with pytest.raises(ValueError):
        SessionStorage(MemoryStorage(), "")
