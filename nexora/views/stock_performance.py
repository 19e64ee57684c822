import pandas as pd
import streamlit as st

from nexora.export import STOCK_PERFORMANCE_COLUMNS, download_csv_button, export_filename
from nexora.market import PERFORMANCE_TYPES, bucket_mask
from nexora.tables import search_mask
from nexora.views.common import error_banner, load, paginate, search_box, show_table, to_frame
from nexora.views.financial import bucket_filters

VIEW = "stock_performance"


def flatten_performance(df: pd.DataFrame) -> pd.DataFrame:
    """Spread the nested `performance` object into its own table columns."""
    rows = []
    for record in df.to_dict(orient="records"):
        performance = record.get("performance") if isinstance(record.get("performance"), dict) else {}
        rows.append({
            label: (performance.get(field.split(".", 1)[1]) if field.startswith("performance.")
                    else record.get(field))
            for label, field in STOCK_PERFORMANCE_COLUMNS.items()
        })
    return pd.DataFrame(rows, columns=list(STOCK_PERFORMANCE_COLUMNS))


def filter_stock_performance(df: pd.DataFrame, performance_type: str, buckets: dict[str, str],
                             search: str = "") -> pd.DataFrame:
    if df.empty or "performanceType" not in df.columns:
        return df.iloc[0:0]
    return df[(df["performanceType"] == performance_type) & search_mask(df, search) & bucket_mask(df, buckets)]


def render():
    st.subheader("Stock Performance")
    rows = load(VIEW, "financial_long")
    error_banner(VIEW)
    df = to_frame(rows, ["id", "companyName", "domain", "industry", "performanceType", "performance"])

    search = search_box(VIEW)
    buckets = bucket_filters(VIEW)
    performance_type = st.segmented_control(
        "Performance", PERFORMANCE_TYPES, default=PERFORMANCE_TYPES[0], key=f"{VIEW}_type"
    ) or PERFORMANCE_TYPES[0]

    filtered = filter_stock_performance(df, performance_type, buckets, search)
    download_csv_button(
        filtered, STOCK_PERFORMANCE_COLUMNS, export_filename("stock_performance_data"), key=f"{VIEW}_csv"
    )
    page = paginate(filtered, VIEW, (performance_type, tuple(buckets.values()), search))
    table = flatten_performance(page).fillna("N/A")
    show_table(table, search)
