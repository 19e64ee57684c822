import pandas as pd
import streamlit as st

from nexora.export import INTENT_COLUMNS, download_csv_button, export_filename
from nexora.models import IntentRow
from nexora.tables import filter_table, order_matches_first, unique_options
from nexora.views.common import error_banner, load, paginate, search_box, show_table, to_frame

VIEW = "intent"


def filter_intent(df: pd.DataFrame, statuses: list[str], search: str = "") -> pd.DataFrame:
    filtered = filter_table(df, {"intentStatus": statuses}, search)
    return order_matches_first(filtered, search)


def render():
    st.subheader("Intent")
    rows = load(VIEW, "intent", model=IntentRow)
    error_banner(VIEW)
    df = to_frame(rows, INTENT_COLUMNS)

    col1, col2 = st.columns([2, 1])
    with col1:
        search = search_box(VIEW, "Search company or status...")
    with col2:
        statuses = st.multiselect(
            "Intent Status", unique_options(df, "intentStatus"), key=f"{VIEW}_status"
        )

    filtered = filter_intent(df, statuses, search)
    download_csv_button(filtered, INTENT_COLUMNS, export_filename("intent_data"), key=f"{VIEW}_csv")
    page = paginate(filtered, VIEW, (tuple(statuses), search))
    show_table(page, search, INTENT_COLUMNS, {"companyName": "Company Name", "intentStatus": "Intent Status"})
