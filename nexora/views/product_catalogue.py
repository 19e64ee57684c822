import pandas as pd
import streamlit as st

from nexora.export import PRODUCT_COLUMNS, download_csv_button, export_filename
from nexora.models import ProductRow
from nexora.tables import filter_table, highlight_text, order_matches_first, unique_options
from nexora.views.common import (
    error_banner,
    load,
    paginate,
    search_box,
    select_filter,
    show_table,
    to_frame,
)

VIEW = "product_catalogue"
YEARS = [2025, 2026]
FILTERS = {"prodName": "Product", "category": "Category", "subCategory": "Sub Category"}


def filter_products(df: pd.DataFrame, filters: dict[str, str], search: str = "") -> pd.DataFrame:
    return order_matches_first(filter_table(df, filters, search), search)


def render():
    st.subheader("Product Catalogue")
    year = st.radio("Year", YEARS, horizontal=True, key=f"{VIEW}_year")
    rows = load(VIEW, "product_catalogue", year, model=ProductRow)
    error_banner(VIEW)
    df = to_frame(rows, PRODUCT_COLUMNS)

    search = search_box(VIEW)
    cols = st.columns(len(FILTERS))
    filters = {
        field: select_filter(label, unique_options(df, field), f"{VIEW}_{field}", cols[i])
        for i, (field, label) in enumerate(FILTERS.items())
    }

    filtered = filter_products(df, filters, search)
    download_csv_button(
        filtered, PRODUCT_COLUMNS, export_filename(f"product_catalogue_{year}"), key=f"{VIEW}_csv"
    )
    page = paginate(filtered, VIEW, (year, tuple(filters.values()), search))
    show_table(page, search, ["prodName", "category", "subCategory"])

    if not page.empty:
        choice = st.selectbox("Description", list(page.index),
                              format_func=lambda i: str(page.at[i, "prodName"]),
                              key=f"{VIEW}_description")
        text = page.at[choice, "description"] if choice in page.index else None
        st.markdown(highlight_text(text or "N/A", search), unsafe_allow_html=True)
