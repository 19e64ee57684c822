import re

import pandas as pd
import streamlit as st

from nexora.charts import RENEWAL_QUARTER_COLORS, create_bar
from nexora.export import RENEWAL_COLUMNS, download_csv_button, export_filename
from nexora.models import RenewalRow
from nexora.tables import filter_table, unique_options
from nexora.views.common import error_banner, load, paginate, select_filter, show_table, to_frame

VIEW = "renewal"
QUARTER_PATTERN = re.compile(r"Q(\d+)\s(\d{4})")


def quarter_sort_key(label: str) -> tuple[int, int]:
    """Later years first, then Q1..Q4 within a year; unparseable labels last."""
    match = QUARTER_PATTERN.search(str(label))
    if not match:
        return (0, 0)
    return (-int(match.group(2)), int(match.group(1)))


def quarter_counts(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["qtr", "count", "color"])
    labels = df["qtr"].fillna("").astype(str).replace("", "Unknown")
    counts = labels.value_counts(sort=False).rename_axis("qtr").reset_index(name="count")
    order = sorted(range(len(counts)), key=lambda i: quarter_sort_key(counts.at[i, "qtr"]))
    counts = counts.iloc[order].copy()
    counts["color"] = counts["qtr"].map(lambda q: RENEWAL_QUARTER_COLORS.get(q, "#9ca3af"))
    return counts.reset_index(drop=True)


def filter_renewals(df: pd.DataFrame, product: str = "", qtr: str = "") -> pd.DataFrame:
    return filter_table(df, {"product": product, "qtr": qtr})


def render():
    st.subheader("Renewal Intelligence")
    all_rows = load(VIEW, "renewal_intelligence", model=RenewalRow)
    companies = unique_options(to_frame(all_rows, ["companyName"]), "companyName")

    cols = st.columns(3)
    company = select_filter("Company Name", companies, f"{VIEW}_company", cols[0])
    rows = load(VIEW, "renewal_intelligence", company, model=RenewalRow) if company else all_rows
    error_banner(VIEW)
    df = to_frame(rows, ["companyName", "product", "renewalDate", "qtr"])

    product = select_filter("Product", unique_options(df, "product"), f"{VIEW}_product", cols[1])
    qtr = select_filter("Renewal QTR", unique_options(df, "qtr"), f"{VIEW}_qtr", cols[2])
    filtered = filter_renewals(df, product, qtr)

    download_csv_button(
        filtered, RENEWAL_COLUMNS, export_filename("renewal-intelligence", dated=True), key=f"{VIEW}_csv"
    )

    table_col, chart_col = st.columns([3, 2])
    with table_col:
        page = paginate(filtered, VIEW, (company, product, qtr))
        show_table(page, columns=list(RENEWAL_COLUMNS.values()),
                   labels={v: k for k, v in RENEWAL_COLUMNS.items()})
    with chart_col:
        counts = quarter_counts(filtered)
        create_bar(
            counts,
            "qtr",
            "count",
            "Renewals by Quarter",
            color_map=dict(zip(counts["qtr"], counts["color"])),
        )
