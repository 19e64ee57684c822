import streamlit as st

from nexora.export import GROWTH_COLUMNS, download_csv_button, export_filename
from nexora.tables import filter_table
from nexora.views.common import error_banner, load, paginate, search_box, show_table, to_frame

VIEW = "growth"


def render():
    st.subheader("Growth")
    rows = load(VIEW, "growth")
    error_banner(VIEW)
    df = to_frame(rows, list(GROWTH_COLUMNS.values()))

    search = search_box(VIEW)
    filtered = filter_table(df, search=search)
    download_csv_button(filtered, GROWTH_COLUMNS, export_filename("growth_data"), key=f"{VIEW}_csv")
    page = paginate(filtered, VIEW, search)
    show_table(page, search, list(GROWTH_COLUMNS.values()), {v: k for k, v in GROWTH_COLUMNS.items()})
