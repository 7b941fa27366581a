from pathlib import Path

import pandas as pd
import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from mundolar.config import AppConfig

APP_PATH = str(Path(__file__).resolve().parents[1] / "app.py")

@pytest.fixture(autouse=True)
def storefront_config(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    pd.DataFrame([
        {"id": 1, "name": "Radios", "parent_id": None, "status": "Activo", "position": 1},
    ]).to_csv(data_dir / "categories.csv", index=False)
    pd.DataFrame([
        {"id": 1, "name": "Hytera", "status": "Activo", "position": 1},
    ]).to_csv(data_dir / "brands.csv", index=False)
    pd.DataFrame([
        {"id": 1, "name": "Radio Hytera HP705", "price": 1000, "original_price": None, "price_with_iva": None,
         "image_urls": None, "category_id": 1, "brand_id": 1, "status": "Activo",
         "created_at": "2024-01-01T10:00:00"},
    ]).to_csv(data_dir / "products.csv", index=False)

    monkeypatch.setattr("mundolar.config._config", AppConfig(
        data_backend="csv",
        data_dir=str(data_dir),
        cart_storage_path=str(tmp_path / "local_storage.json"),
    ))
    st.cache_resource.clear()
    yield
    st.cache_resource.clear()

def open_page(pagina, **params):
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.query_params["pagina"] = pagina
    for key, value in params.items():
        at.query_params[key] = value
    return at.run()

def cart_label(at):
    return at.button(key="nav-carrito").label

def test_each_session_has_its_own_cart():
    alice = open_page("inicio")
    alice.button(key="home-add-1").click().run()
    assert not alice.exception
    assert cart_label(alice) == "Carrito (1)"

    bob = open_page("carrito")
    assert not bob.exception
    assert cart_label(bob) == "Carrito"
    assert any("vacío" in info.value for info in bob.info)

def test_cart_survives_reload_with_session_param():
    alice = open_page("inicio")
    alice.button(key="home-add-1").click().run()
    sid = alice.session_state["cart_session"]

    reloaded = open_page("carrito", sesion=sid)
    assert cart_label(reloaded) == "Carrito (1)"
    assert not any("vacío" in info.value for info in reloaded.info)

def test_forged_session_param_gets_a_fresh_session():
    at = open_page("carrito", sesion="../../etc")
    assert at.session_state["cart_session"] != "../../etc"
    assert cart_label(at) == "Carrito"

@pytest.mark.parametrize("pagina", ["inicio", "catalogo", "producto", "carrito"])
def test_pages_render_without_deprecated_width_argument(pagina):
    at = open_page(pagina, id="1") if pagina == "producto" else open_page(pagina)
    assert not at.exception
    assert not any("use_container_width" in w.value for w in at.warning)
    assert "use_container_width" not in Path(APP_PATH).read_text(encoding="utf-8")
