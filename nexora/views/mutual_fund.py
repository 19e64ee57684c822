import streamlit as st

from nexora.export import download_csv_button, export_filename
from nexora.tables import filter_table
from nexora.views.common import error_banner, load, paginate, search_box, show_table, to_frame

VIEW = "mutual_fund"


def render():
    st.subheader("Mutual Fund")
    rows = load(VIEW, "mutual_funds")
    error_banner(VIEW)
    df = to_frame(rows)

    search = search_box(VIEW)
    filtered = filter_table(df, search=search)
    download_csv_button(filtered, None, export_filename("mutual_fund_data"), key=f"{VIEW}_csv")
    page = paginate(filtered, VIEW, search)
    show_table(page, search)
