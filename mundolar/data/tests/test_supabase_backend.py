from types import SimpleNamespace

import pytest

from mundolar.data.backends.supabase_backend import PRODUCT_COLUMNS, SupabaseDataAccess
from mundolar.data.models import CatalogFilters, CategoryFilters, ProductResponse
from mundolar.data.query import CatalogQuery

class FakeQuery:
    """Records every builder call; ``execute`` returns the canned response."""
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []
        self._not = False
        client.queries.append(self)

    def _record(self, name, *args, **kwargs):
        if self._not:
            name = f"not_.{name}"
            self._not = False
        self.calls.append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    @property
    def not_(self):
        self._not = True
        return self

    def __getattr__(self, name):
        if name in {"eq", "neq", "in_", "is_", "gte", "lte", "order", "range", "limit"}:
            return lambda *args, **kwargs: self._record(name, *args, **kwargs)
        raise AttributeError(name)

    def execute(self):
        if self.client.error:
            raise self.client.error
        return self.client.response

    def names(self):
        return [c[0] for c in self.calls]

    def call(self, name):
        return [c for c in self.calls if c[0] == name]

class FakeClient:
    def __init__(self, data=None, count=None, error=None):
        self.response = SimpleNamespace(data=data or [], count=count)
        self.error = error
        self.queries = []

    def table(self, name):
        return FakeQuery(self, name)

ROW = {
    "id": 5,
    "name": "Radio Kenwood NX1300",
    "price": 1000,
    "original_price": 1200,
    "price_with_iva": None,
    "status": "Activo",
    "image_urls": ["https://img/nx.webp"],
    "category_id": 1,
    "brand_id": 3,
    "on_offer": True,
    "brands": {"name": "Kenwood"},
    "categories": [{"name": "Radios Portátiles"}],
    "created_at": "2024-05-01T12:00:00+00:00",
}

def test_catalog_page_query_shape():
    client = FakeClient(data=[ROW], count=40)
    dao = SupabaseDataAccess(client)
    query = CatalogQuery.from_params({
        "categoria": "1,2", "marca": "3", "oferta": "1", "minPrice": "1190", "sort": "price_desc", "page": "2",
    })

    page = dao.get_catalog_page(query.to_filters(), sort=query.sort, page=query.page, page_size=query.page_size)

    q = client.queries[0]
    assert q.table == "products"
    assert q.calls[0] == ("select", (PRODUCT_COLUMNS,), {"count": "exact"})
    assert ("eq", ("status", "Activo"), {}) in q.calls
    assert ("in_", ("category_id", [1, 2]), {}) in q.calls
    assert ("in_", ("brand_id", [3]), {}) in q.calls
    assert ("eq", ("on_offer", True), {}) in q.calls
    assert [c for c in q.calls if c[0].startswith("not_.")] == []
    assert q.call("gte") == [("gte", ("price", pytest.approx(1000.0)), {})]
    assert q.call("lte") == []
    assert q.call("order") == [("order", ("price",), {"desc": True})]
    assert q.call("range") == [("range", (16, 31), {})]

    assert page.total_count == 40
    assert page.page_count == 3
    product = page.items[0]
    assert product.brand_name == "Kenwood"
    assert product.category_name == "Radios Portátiles"
    assert product.on_offer

def test_catalog_page_error_gives_empty_page():
    dao = SupabaseDataAccess(FakeClient(error=RuntimeError("boom")))
    page = dao.get_catalog_page(CatalogFilters(), page=3)
    assert page.items == []
    assert page.total_count == 0
    assert page.page == 3

def test_single_ids_use_eq():
    client = FakeClient()
    SupabaseDataAccess(client).get_catalog_page(CatalogFilters(category_id=4, brand_id=2))
    q = client.queries[0]
    assert ("eq", ("category_id", 4), {}) in q.calls
    assert ("eq", ("brand_id", 2), {}) in q.calls
    assert q.call("in_") == []

def test_top_level_categories():
    client = FakeClient(data=[{"id": 1, "name": "Radios", "parent_id": None, "status": "Activo", "position": 1}])
    cats = SupabaseDataAccess(client).list_categories(CategoryFilters(top_level_only=True, limit=4))
    q = client.queries[0]
    assert q.table == "categories"
    assert ("is_", ("parent_id", "null"), {}) in q.calls
    assert ("limit", (4,), {}) in q.calls
    assert [c.name for c in cats] == ["Radios"]

def test_list_brands_error_is_empty():
    assert SupabaseDataAccess(FakeClient(error=RuntimeError("down"))).list_brands() == []

def test_get_product():
    client = FakeClient(data=[ROW])
    product = SupabaseDataAccess(client).get_product(5)
    assert product.id == 5
    assert ("eq", ("id", 5), {}) in client.queries[0].calls
    assert SupabaseDataAccess(FakeClient()).get_product(6) is None

def test_featured_products_newest_first():
    client = FakeClient(data=[ROW])
    SupabaseDataAccess(client).get_featured_products(limit=12)
    q = client.queries[0]
    assert ("order", ("created_at",), {"desc": True}) in q.calls
    assert ("limit", (12,), {}) in q.calls

def test_related_products_exclude_self():
    client = FakeClient(data=[])
    product = ProductResponse.from_row(ROW)
    SupabaseDataAccess(client).get_related_products(product, limit=4)
    q = client.queries[0]
    assert ("eq", ("category_id", 1), {}) in q.calls
    assert ("neq", ("id", 5), {}) in q.calls

def test_price_bounds():
    client = FakeClient(data=[{"price": 1000}, {"price": 250000}, {"price": None}])
    bounds = SupabaseDataAccess(client).get_price_bounds()
    assert (bounds.min_price, bounds.max_price) == (1000, 250000)
    assert SupabaseDataAccess(FakeClient()).get_price_bounds() is None

BAD_ROW = {**ROW, "id": 6, "name": None}

def test_invalid_rows_give_empty_results():
    dao = SupabaseDataAccess(FakeClient(data=[ROW, BAD_ROW], count=2))
    page = dao.get_catalog_page(CatalogFilters(), page=1)
    assert page.items == []
    assert page.total_count == 0
    assert dao.get_featured_products() == []
    assert dao.get_related_products(ProductResponse.from_row(ROW)) == []
    assert SupabaseDataAccess(FakeClient(data=[BAD_ROW])).get_product(6) is None

def test_invalid_category_and_brand_rows_give_empty_lists():
    dao = SupabaseDataAccess(FakeClient(data=[{"id": "x", "name": None}]))
    assert dao.list_categories() == []
    assert dao.list_brands() == []
    assert SupabaseDataAccess(FakeClient(data=[{"price": "n/a"}])).get_price_bounds() is None
