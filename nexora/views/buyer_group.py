import streamlit as st

from nexora.export import download_csv_button, export_filename
from nexora.models import BuyerGroupRow
from nexora.tables import filter_table, unique_options
from nexora.views.common import (
    error_banner,
    load,
    paginate,
    search_box,
    select_filter,
    show_table,
    to_frame,
)

VIEW = "buyer_group"
COLUMNS = [
    "companyName",
    "domain",
    "industry",
    "country",
    "buyerGroupName",
    "relation",
    "shares",
    "date",
]


def render():
    st.subheader("Buyer Group")
    rows = load(VIEW, "buyer_groups", model=BuyerGroupRow)
    error_banner(VIEW)
    df = to_frame(rows, COLUMNS)

    search = search_box(VIEW)
    cols = st.columns(2)
    relation = select_filter("Relation", unique_options(df, "relation"), f"{VIEW}_relation", cols[0])
    country = select_filter("Country", unique_options(df, "country"), f"{VIEW}_country", cols[1])

    filtered = filter_table(df, {"relation": relation, "country": country}, search)
    download_csv_button(filtered, None, export_filename("buyer_group_data"), key=f"{VIEW}_csv")
    page = paginate(filtered, VIEW, (relation, country, search))
    show_table(page, search, COLUMNS)
