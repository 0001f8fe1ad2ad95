"""
Streamlit UI for storefront pricing - product page preview for catalog staff.

Features:
- Product picker with ?variant= seeding
- Attribute selectors with compatibility, stock and low-stock badges
- Price block with struck-through MRP and discount badge
- Tax inclusive/exclusive converter
- Resolution trace for the last click
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from storefront_pricing.config.settings import get_settings
from storefront_pricing.engine.color_palette import ColorPalette
from storefront_pricing.engine.price_converter import to_exclusive, to_inclusive, tax_amount
from storefront_pricing.services.catalog_service import ProductCatalog
from storefront_pricing.services.product_view import ProductView


st.set_page_config(
    page_title="Storefront Product Preview",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_catalog():
    """Get cached catalog instance."""
    return ProductCatalog(get_settings().catalog_path)


@st.cache_resource
def get_palette():
    settings = get_settings()
    return ColorPalette.load(settings.palette_path, default_hex=settings.default_color_hex)


try:
    catalog = get_catalog()
    palette = get_palette()
    settings = get_settings()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def format_price(amount) -> str:
    if amount is None:
        return "N/A"
    return f"₹{amount:,.2f}".replace(".00", "")


# ============================================================================
# SIDEBAR: Product Selection
# ============================================================================
with st.sidebar:
    st.header("🛍️ Product")

    with st.container(border=True):
        slugs = [p.slug for p in catalog.products]
        slug = st.selectbox(
            "Product",
            options=slugs,
            format_func=lambda s: catalog.get_by_slug(s).name,
            key="product_slug"
        )
        variant_param = st.text_input("?variant=", value="", placeholder="variant slug or id")

    # A new product or seed resets the page state
    view_key = (slug, variant_param)
    if st.session_state.get('view_key') != view_key:
        st.session_state.view = ProductView.open(
            catalog, slug, variant_param=variant_param or None,
            settings=settings, palette=palette
        )
        st.session_state.view_key = view_key

    st.divider()
    st.caption(f"**{len(catalog)} products** loaded from `{settings.catalog_path.name}`")


view: ProductView = st.session_state.view
product = view.product


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title(product.name)
st.caption(f"{product.brand or 'Unbranded'} | {product.slug} | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["🛒 Product Page", "🧮 Tax Converter", "📚 Catalog"])


# ============================================================================
# TAB 1: PRODUCT PAGE
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.6, 1.4], gap="large")

    with col1:
        st.subheader("Configure")

        groups = view.selectors()
        if not groups:
            st.info("This product has no variants.")

        for group in groups:
            with st.container(border=True):
                selected = view.resolver.display_value(group.key, group.selected_value) if group.selected_value else "-"
                st.markdown(f"**{group.label}:** {selected}")

                cols = st.columns(max(len(group.values), 1))
                for col, option in zip(cols, group.values):
                    label = option.display_value
                    if group.is_color:
                        label = f"● {label}"
                    if option.low_stock:
                        label = f"{label} (Low)"

                    with col:
                        if st.button(
                            label,
                            key=f"opt_{group.key}_{option.value}",
                            disabled=not option.is_compatible,
                            type="primary" if option.is_selected else "secondary",
                            help=f"{option.stock} available" if option.is_compatible else "Not available with current selection",
                            use_container_width=True
                        ):
                            view.select(group.key, option.value)
                            st.rerun()

                if group.selected_value:
                    current = next((v for v in group.values if v.value == group.selected_value), None)
                    if current and current.is_compatible:
                        st.markdown(f":green[✓ In Stock ({current.stock} available)]")

    with col2:
        st.subheader("Price")

        with st.container(border=True):
            info = view.price_info()

            m1, m2 = st.columns(2)
            m1.metric("Price", format_price(info.price))
            m2.metric("Stock", info.stock_quantity)

            if info.show_mrp:
                st.markdown(f"~~{format_price(info.mrp)}~~  :red[**{info.discount_percentage}% OFF**]")

            st.caption("Inclusive of all taxes")
            if info.tax_rate:
                st.caption(
                    f"Base {format_price(info.price_exclusive)} + "
                    f"{info.tax_rate:g}% tax {format_price(info.tax_amount)}"
                )

            for warning in view.warnings:
                st.warning(warning)

            st.divider()
            param = view.variant_param()
            st.caption(f"**Variant:** {view.selected_variant.name if view.selected_variant else 'None'}")
            if param:
                st.code(f"/products/{product.slug}?variant={param}", language=None)

        colors = view.resolver.available_colors(palette)
        if colors:
            with st.expander("🎨 Color Availability"):
                st.dataframe(
                    pd.DataFrame([
                        {'Color': c.display_value, 'Hex': c.hex_code, 'Stock': c.stock, 'Variants': c.variant_count}
                        for c in colors
                    ]),
                    use_container_width=True,
                    hide_index=True
                )

    if view.last_resolution:
        with st.expander("🔍 Resolution Details"):
            for t in view.last_resolution.trace:
                if t.value:
                    st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
                else:
                    st.caption(f"**{t.step}**: {t.description}")


# ============================================================================
# TAB 2: TAX CONVERTER
# ============================================================================
with tab2:
    st.subheader("🧮 Tax Converter")

    c1, c2, c3 = st.columns(3)
    with c1:
        amount = st.number_input("Amount", min_value=0.0, value=float(product.base_price), step=1.0)
    with c2:
        rate = st.number_input("Tax Rate %", min_value=0.0, value=float(product.tax_rate or 0), step=1.0)
    with c3:
        direction = st.radio("Amount is", ["Tax inclusive", "Tax exclusive"], horizontal=True)

    if direction == "Tax inclusive":
        exclusive = to_exclusive(amount, rate)
        st.metric("Exclusive", format_price(exclusive))
        st.caption(f"Round trip: {format_price(to_inclusive(exclusive, rate))}")
    else:
        st.metric("Inclusive", format_price(to_inclusive(amount, rate)))
        st.caption(f"Tax: {format_price(tax_amount(amount, rate))}")


# ============================================================================
# TAB 3: CATALOG EXPLORER
# ============================================================================
with tab3:
    st.subheader("📚 Catalog")

    search_term = st.text_input("Search Catalog", placeholder="Enter name, slug or brand...", label_visibility="collapsed")
    catalog_display = catalog.to_frame(search=search_term or None)

    st.dataframe(catalog_display, use_container_width=True, hide_index=True)
    st.caption(f"Total products: {len(catalog):,} | Visible: {len(catalog_display):,}")

    if st.button("🔄 Reload Catalog", type="secondary"):
        catalog.reload()
        st.session_state.pop('view_key', None)
        st.toast("Catalog reloaded")
        st.rerun()
