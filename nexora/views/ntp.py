import pandas as pd
import streamlit as st

from nexora.export import NTP_COLUMNS, download_csv_button, export_filename
from nexora.models import NtpRow
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

VIEW = "ntp"
FILTERS = {
    "companyName": "Company Name",
    "purchasePrediction": "Purchase Prediction",
    "category": "Category",
    "technology": "Technology",
}
TABLE_COLUMNS = [
    "companyName",
    "domain",
    "category",
    "technology",
    "purchaseProbability",
    "purchasePrediction",
]


def filter_ntp(df: pd.DataFrame, filters: dict[str, str], search: str = "") -> pd.DataFrame:
    return order_matches_first(filter_table(df, filters, search), search)


def render():
    st.subheader("NTP®")
    rows = load(VIEW, "ntp", model=NtpRow)
    error_banner(VIEW)
    df = to_frame(rows, NTP_COLUMNS)

    search = search_box(VIEW, "Search by Company Name")
    cols = st.columns(len(FILTERS))
    filters = {
        field: select_filter(label, unique_options(df, field), f"{VIEW}_{field}", cols[i])
        for i, (field, label) in enumerate(FILTERS.items())
    }

    filtered = filter_ntp(df, filters, search)
    download_csv_button(filtered, NTP_COLUMNS, export_filename("ntp_data"), key=f"{VIEW}_csv")
    page = paginate(filtered, VIEW, (tuple(filters.values()), search))
    show_table(page, search, TABLE_COLUMNS)

    if page.empty:
        return
    options = list(page.index)
    choice = st.selectbox(
        "NTP Analysis",
        options,
        format_func=lambda i: f"{page.at[i, 'companyName']} · {page.at[i, 'technology']}",
        key=f"{VIEW}_analysis",
    )
    with st.expander("Analysis", expanded=True):
        analysis = page.at[choice, "ntpAnalysis"] if choice in page.index else None
        if analysis:
            st.markdown(highlight_text(analysis, search), unsafe_allow_html=True)
        else:
            st.caption("No analysis available.")
