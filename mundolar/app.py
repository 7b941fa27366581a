import re
import uuid
from typing import Dict, List, Optional
from urllib.parse import quote

import streamlit as st

# Configuration
from mundolar.config import get_config
from mundolar.logging import get_logger

# DataAccess interface + backend factory (csv or supabase, from DATA_BACKEND)
from mundolar.data.interface import DataAccess
from mundolar.data.models import BrandFilters, CategoryFilters, ProductResponse
from mundolar.data.query import SORT_OPTIONS, CatalogQuery
from mundolar.data.util import get_data_access

from mundolar.cart import CartStore, JsonFileStorage, SessionStorage
from mundolar.formatting import format_price
from mundolar.integrations.supabase_auth import get_supabase_auth
from mundolar.notifications import notify_admins
from mundolar.pricing import price_with_iva

st.set_page_config(page_title="Mundolar | Radios y comunicaciones", layout="wide")

config = get_config()
logger = get_logger(__name__)

PAGES = {
    "inicio": "Inicio",
    "catalogo": "Catálogo",
    "servicios": "Servicios",
    "contacto": "Contacto",
    "nosotros": "Nosotros",
    "carrito": "Carrito",
}

# -----------------------------------------------------------------------------
# Backend and cart. One data access object per process. Each visitor session
# gets its own cart keys, and the cart is re-read on every rerun so expiry is
# checked each time.
# -----------------------------------------------------------------------------
@st.cache_resource
def load_data_access() -> DataAccess:
    return get_data_access(config.data_backend)

da = load_data_access()

SESSION_PARAM = "sesion"
_SESSION_ID = re.compile(r"^[0-9a-f]{32}$")


def cart_session_id() -> str:
    """Session id kept in session_state and mirrored to ``?sesion=`` for reloads."""
    sid = st.session_state.get("cart_session")
    if not sid:
        sid = st.query_params.get(SESSION_PARAM, "")
        if not _SESSION_ID.match(sid):
            sid = uuid.uuid4().hex
        st.session_state["cart_session"] = sid
    if st.query_params.get(SESSION_PARAM) != sid:
        st.query_params[SESSION_PARAM] = sid
    return sid


cart = CartStore(
    SessionStorage(JsonFileStorage(config.cart_storage_path), cart_session_id()),
    ttl_hours=config.cart_ttl_hours,
)


def go(**params: str) -> None:
    """Replace the query string and rerun, e.g. ``go(pagina="producto", id="7")``."""
    params = {k: v for k, v in params.items() if v not in (None, "")}
    params[SESSION_PARAM] = cart_session_id()
    st.query_params.from_dict(params)
    st.rerun()


def whatsapp_url(message: str) -> str:
    return f"https://api.whatsapp.com/send?phone={config.whatsapp_phone}&text={quote(message)}"


def add_to_cart(product: ProductResponse) -> None:
    cart.add(product)
    st.toast(f"{product.name} agregado al carrito")
    st.rerun()


# -----------------------------------------------------------------------------
# Shared widgets
# -----------------------------------------------------------------------------
def price_block(product: ProductResponse) -> None:
    if product.on_offer:
        st.markdown(
            f"~~{format_price(product.display_original_price)}~~ "
            f"**{format_price(product.display_price)}** "
            f":red[-{product.discount_percent}%]"
        )
    else:
        st.markdown(f"**{format_price(product.display_price)}**")


def product_card(product: ProductResponse, key: str) -> None:
    with st.container(border=True):
        st.image(product.main_image or f"https://picsum.photos/400/300?random={product.id}", width="stretch")
        st.caption(product.brand_name or "Marca")
        st.markdown(f"**{product.name}**")
        price_block(product)
        c1, c2 = st.columns(2)
        if c1.button("Ver", key=f"{key}-ver-{product.id}", width="stretch"):
            go(pagina="producto", id=str(product.id))
        if c2.button("Agregar", key=f"{key}-add-{product.id}", width="stretch", type="primary"):
            add_to_cart(product)


def product_grid(products: List[ProductResponse], key: str, columns: int = 4) -> None:
    for start in range(0, len(products), columns):
        cols = st.columns(columns)
        for col, product in zip(cols, products[start:start + columns]):
            with col:
                product_card(product, key)


def header(current: str) -> None:
    cols = st.columns(len(PAGES))
    for col, (slug, label) in zip(cols, PAGES.items()):
        if slug == "carrito" and cart.count:
            label = f"{label} ({cart.count})"
        if col.button(label, key=f"nav-{slug}", width="stretch", type="primary" if slug == current else "secondary"):
            go(pagina=slug)
    st.divider()


# -----------------------------------------------------------------------------
# Pages
# -----------------------------------------------------------------------------
def page_inicio() -> None:
    st.title("Mundolar")
    st.markdown("#### Radios de comunicación, repuestos y accesorios para tu operación")

    categories = da.list_categories(CategoryFilters(top_level_only=True, limit=config.home_categories_limit))
    if categories:
        st.markdown("### Categorías")
        cols = st.columns(len(categories))
        for col, category in zip(cols, categories):
            with col:
                if category.image_url:
                    st.image(category.image_url, width="stretch")
                if st.button(category.name, key=f"cat-{category.id}", width="stretch"):
                    go(pagina="catalogo", categoria=str(category.id))

    st.markdown("### Productos destacados")
    featured = da.get_featured_products(limit=config.featured_products_limit)
    if featured:
        product_grid(featured, key="home")
    else:
        st.info("Pronto tendremos productos destacados.")

    brands = da.list_brands(BrandFilters())
    if brands:
        st.markdown("### Marcas")
        cols = st.columns(min(len(brands), 6))
        for i, brand in enumerate(brands):
            with cols[i % len(cols)]:
                if brand.image_url:
                    st.image(brand.image_url, width="stretch")
                if st.button(brand.name, key=f"brand-{brand.id}", width="stretch"):
                    go(pagina="catalogo", marca=str(brand.id))


def catalog_sidebar(query: CatalogQuery) -> CatalogQuery:
    """Sidebar filters; returns the query the widgets describe."""
    st.sidebar.header("Filtros")

    categories = da.list_categories(CategoryFilters())
    category_names = {c.id: c.name for c in categories}
    selected_categories = st.sidebar.multiselect(
        "Categorías",
        options=list(category_names),
        default=[i for i in query.category_ids if i in category_names],
        format_func=lambda i: category_names[i],
    )

    brands = da.list_brands(BrandFilters())
    brand_names = {b.id: b.name for b in brands}
    selected_brands = st.sidebar.multiselect(
        "Marcas",
        options=list(brand_names),
        default=[i for i in query.brand_ids if i in brand_names],
        format_func=lambda i: brand_names[i],
    )

    on_offer = st.sidebar.checkbox("Solo ofertas", value=query.on_offer)

    st.sidebar.markdown("**Precio (IVA incluido)**")
    bounds = da.get_price_bounds()
    ceiling = float(price_with_iva(bounds.max_price)) if bounds else None
    min_price = st.sidebar.number_input("Mínimo", min_value=0.0, value=query.min_price, step=1000.0, placeholder="0")
    max_price = st.sidebar.number_input(
        "Máximo", min_value=0.0, value=query.max_price, step=1000.0,
        placeholder=format_price(ceiling) if ceiling else "",
    )

    if st.sidebar.button("Limpiar filtros", width="stretch"):
        go(pagina="catalogo")

    return query.model_copy(update={
        "category_ids": selected_categories,
        "brand_ids": selected_brands,
        "on_offer": on_offer,
        "min_price": min_price,
        "max_price": max_price,
    })


def page_catalogo() -> None:
    query = CatalogQuery.from_params(st.query_params, page_size=config.catalog_page_size)

    chosen = catalog_sidebar(query)
    sort_keys = list(SORT_OPTIONS)
    sort = st.selectbox(
        "Ordenar por",
        options=sort_keys,
        index=sort_keys.index(query.sort),
        format_func=lambda k: SORT_OPTIONS[k],
    )
    chosen = chosen.model_copy(update={"sort": sort})

    # Any filter or sort change starts over at page 1
    if chosen.to_params(page=1) != query.to_params(page=1):
        go(pagina="catalogo", **chosen.to_params(page=1))

    page = da.get_catalog_page(query.to_filters(), sort=query.sort, page=query.page, page_size=query.page_size)

    st.title("Catálogo")
    st.caption(f"{page.total_count} productos")
    if not page.items:
        st.info("No encontramos productos con esos filtros.")
    else:
        product_grid(page.items, key="catalogo")

    # Pagination
    c1, c2, c3 = st.columns([1, 2, 1])
    if c1.button("← Anterior", disabled=not page.has_previous, width="stretch"):
        go(pagina="catalogo", **query.to_params(page=query.page - 1))
    c2.markdown(f"<div style='text-align:center'>Página {page.page} de {page.page_count}</div>", unsafe_allow_html=True)
    if c3.button("Siguiente →", disabled=not page.has_next, width="stretch"):
        go(pagina="catalogo", **query.to_params(page=query.page + 1))

    st.link_button(
        "¿No encuentras lo que buscas? Escríbenos por WhatsApp",
        whatsapp_url("Hola Mundolar, estoy buscando un equipo que no encuentro en el catálogo."),
    )


def page_producto() -> None:
    try:
        product_id = int(st.query_params.get("id", ""))
    except ValueError:
        product_id = None

    product = da.get_product(product_id) if product_id is not None else None
    if product is None or not product.is_active:
        st.warning("Producto no encontrado.")
        if st.button("Volver al catálogo"):
            go(pagina="catalogo")
        return

    left, right = st.columns([3, 2])
    with left:
        images = product.image_urls or [f"https://picsum.photos/400/300?random={product.id}"]
        st.image(images[0], width="stretch")
        if len(images) > 1:
            thumbs = st.columns(len(images) - 1)
            for col, url in zip(thumbs, images[1:]):
                col.image(url, width="stretch")

    with right:
        st.caption(product.brand_name or "Marca")
        st.title(product.name)
        st.caption(f"SKU: {product.display_sku}")
        if product.category_name:
            st.caption(f"Categoría: {product.category_name}")
        price_block(product)
        st.caption("IVA incluido")
        if st.button("Agregar al carrito", type="primary", width="stretch"):
            add_to_cart(product)
        st.link_button(
            "Cotizar por WhatsApp",
            whatsapp_url(f"Hola Mundolar, quiero cotizar {product.name} ({product.display_sku})."),
            width="stretch",
        )
        if product.description:
            st.markdown("#### Descripción")
            st.write(product.description)

    related = da.get_related_products(product, limit=config.related_products_limit)
    if related:
        st.markdown("### Productos relacionados")
        product_grid(related, key="related")


def cart_message(lines: List[Dict]) -> str:
    rows = [f"- {line['quantity']} x {line['name']} ({format_price(line['line_total'])})" for line in lines]
    return "Hola Mundolar, quiero cotizar:\n" + "\n".join(rows) + f"\nTotal: {format_price(cart.total)}"


def page_carrito() -> None:
    st.title("Carrito")
    items = cart.items
    if not items:
        st.info("Tu carrito está vacío.")
        if st.button("Ir al catálogo"):
            go(pagina="catalogo")
        return

    for item in items:
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([1, 3, 2, 1])
            c1.image(item.image_url, width="stretch")
            c2.markdown(f"**{item.name}**  \n{item.brand_name}  \n{format_price(item.unit_price)} c/u")
            quantity = c3.number_input(
                "Cantidad", min_value=0, value=item.quantity, step=1, key=f"qty-{item.id}",
            )
            if quantity != item.quantity:
                cart.update_quantity(item.id, int(quantity))
                st.rerun()
            c3.markdown(f"**{format_price(item.line_total)}**")
            if c4.button("Quitar", key=f"remove-{item.id}"):
                cart.remove(item.id)
                st.rerun()

    st.markdown(f"## Total: {format_price(cart.total)}")
    st.caption("Precios con IVA incluido")

    lines = [{"name": i.name, "quantity": i.quantity, "line_total": i.line_total} for i in cart.items]
    c1, c2 = st.columns(2)
    c1.link_button("Enviar pedido por WhatsApp", whatsapp_url(cart_message(lines)), type="primary", width="stretch")
    if c2.button("Vaciar carrito", width="stretch"):
        cart.clear()
        st.rerun()


def page_servicios() -> None:
    st.title("Servicios")
    st.markdown(
        """
        - **Venta de equipos**: radios portátiles, móviles y repetidoras de las principales marcas.
        - **Programación y configuración** de radios análogos y digitales.
        - **Soporte técnico y reparación** con repuestos originales.
        - **Alquiler de radios** para eventos y operaciones temporales.
        """
    )
    st.link_button("Solicitar un servicio", whatsapp_url("Hola Mundolar, quiero información sobre sus servicios."))


def submit_quote_request(name: str, email: str, phone: str, message: str) -> None:
    """Notify every admin about a contact form submission."""
    try:
        admin_client = get_supabase_auth().get_admin_client()
    except RuntimeError as e:
        logger.error(f"Contact form not delivered: {e}")
        return
    body = f"{name} ({email}, {phone}): {message}"
    sent = notify_admins(admin_client, "Nueva solicitud de cotización", body, "quote")
    logger.info(f"Contact form from {email} notified {sent} admins")


def page_contacto() -> None:
    st.title("Contacto")
    c1, c2 = st.columns(2)
    with c1:
        st.markdown(f"**Correo:** {config.contact_email}")
        st.markdown(f"**WhatsApp:** +{config.whatsapp_phone}")
        st.link_button("Escríbenos por WhatsApp", whatsapp_url("Hola Mundolar, quiero más información."))
    with c2:
        with st.form("contacto"):
            name = st.text_input("Nombre")
            email = st.text_input("Correo")
            phone = st.text_input("Teléfono")
            message = st.text_area("¿Qué necesitas?")
            submitted = st.form_submit_button("Enviar", type="primary")
        if submitted:
            if not name or not email or not message:
                st.error("Nombre, correo y mensaje son obligatorios.")
            else:
                submit_quote_request(name, email, phone, message)
                st.success("¡Gracias! Te contactaremos pronto.")


def page_nosotros() -> None:
    st.title("Nosotros")
    st.markdown(
        """
        Mundolar es una empresa colombiana dedicada a las radiocomunicaciones.
        Distribuimos equipos de **Motorola Solutions**, **Hytera**, **Kenwood** e **Icom**,
        y acompañamos a nuestros clientes desde la asesoría hasta el soporte técnico.
        """
    )


ROUTES = {
    "inicio": page_inicio,
    "catalogo": page_catalogo,
    "producto": page_producto,
    "carrito": page_carrito,
    "servicios": page_servicios,
    "contacto": page_contacto,
    "nosotros": page_nosotros,
}

# -----------------------------------------------------------------------------
# Router
# -----------------------------------------------------------------------------
pagina: Optional[str] = st.query_params.get("pagina", "inicio")
if pagina not in ROUTES:
    pagina = "inicio"

header(pagina)
ROUTES[pagina]()

st.divider()
st.caption(f"Mundolar · {config.contact_email} · Precios en pesos colombianos con IVA incluido")
