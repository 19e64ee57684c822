import pandas as pd
import streamlit as st

from nexora.export import FINANCIAL_COLUMNS, download_csv_button, export_filename
from nexora.market import BUCKET_FILTERS, BUCKET_LABELS, bucket_mask, sanitize_financial_rows
from nexora.tables import search_mask
from nexora.views.common import error_banner, load, paginate, search_box, show_table, to_frame

VIEW = "financial"


def bucket_filters(view: str) -> dict[str, str]:
    cols = st.columns(len(BUCKET_FILTERS))
    selections = {}
    for col, (name, (_, buckets)) in zip(cols, BUCKET_FILTERS.items()):
        choice = col.selectbox(BUCKET_LABELS[name], ["All"] + list(buckets), key=f"{view}_{name}")
        selections[name] = "" if choice == "All" else choice
    return selections


def filter_financial(df: pd.DataFrame, buckets: dict[str, str], search: str = "") -> pd.DataFrame:
    if df.empty:
        return df
    return df[search_mask(df, search) & bucket_mask(df, buckets)]


def render():
    st.subheader("Financial")
    rows = sanitize_financial_rows(load(VIEW, "financial_wide"))
    error_banner(VIEW)
    df = to_frame(rows, list(FINANCIAL_COLUMNS.values()))

    search = search_box(VIEW)
    buckets = bucket_filters(VIEW)
    filtered = filter_financial(df, buckets, search)

    download_csv_button(filtered, FINANCIAL_COLUMNS, export_filename("financial_data"), key=f"{VIEW}_csv")
    page = paginate(filtered, VIEW, (tuple(buckets.values()), search))
    show_table(page, search, list(FINANCIAL_COLUMNS.values()),
               {v: k for k, v in FINANCIAL_COLUMNS.items()})
