"""CSV export of the table a view currently shows."""

import csv
from datetime import date
from typing import Any

import pandas as pd
import streamlit as st

from nexora.tables import stringify


def _cell(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value)
    return stringify(value)


def _resolve(row: dict, field: str) -> Any:
    # "performance.Close" reads a nested object
    value: Any = row
    for part in field.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def to_csv(df: pd.DataFrame, columns: dict[str, str] | list[str] | None = None) -> str:
    """Serialise rows with every field quoted; `columns` maps header -> field."""
    if columns is None:
        columns = list(df.columns)
    if not isinstance(columns, dict):
        columns = {c: c for c in columns}

    records = df.to_dict(orient="records")
    table = pd.DataFrame(
        [[_cell(_resolve(r, field)) for field in columns.values()] for r in records],
        columns=list(columns.keys()),
    )
    text = table.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return text.rstrip("\n")


def export_filename(stem: str, dated: bool = False) -> str:
    if dated:
        return f"{stem}-{date.today().isoformat()}.csv"
    return f"{stem}.csv"


def download_csv_button(df: pd.DataFrame, columns, filename: str, key: str | None = None):
    st.download_button(
        label="Export CSV",
        data=to_csv(df, columns).encode("utf-8"),
        file_name=filename,
        mime="text/csv",
        disabled=df.empty,
        key=key,
    )


INTENT_COLUMNS = ["companyName", "intentStatus"]

NTP_COLUMNS = [
    "companyName",
    "domain",
    "category",
    "technology",
    "purchaseProbability",
    "purchasePrediction",
    "ntpAnalysis",
]

RENEWAL_COLUMNS = {
    "Account Name": "companyName",
    "Product": "product",
    "Renewal QTR": "qtr",
}

PRODUCT_COLUMNS = ["prodName", "category", "subCategory", "description"]

FINANCIAL_COLUMNS = {
    "ID": "id",
    "Company Name": "companyName",
    "Domain": "domain",
    "Industry": "industry",
    "Full Time Employees": "fullTimeEmployees",
    "Investor Website": "investorWebsite",
    "Exchange": "exchange",
    "Address": "address",
    "City": "city",
    "State": "state",
    "Country": "country",
    "Contact": "contact",
    "Date & Time": "dateTime",
    "Current Price": "currentPrice",
    "Market Cap": "marketCap",
    "Total Revenue": "totalRevenue",
    "Revenue Growth": "revenueGrowth",
    "Profit Growth": "profitGrowth",
}

STOCK_PERFORMANCE_COLUMNS = {
    "ID": "id",
    "Company Name": "companyName",
    "Domain": "domain",
    "Industry": "industry",
    "Performance Type": "performanceType",
    "Date": "performance.Date",
    "Open": "performance.Open",
    "High": "performance.High",
    "Low": "performance.Low",
    "Close": "performance.Close",
    "Volume": "performance.Volume",
    "Adj. Close": "performance.Adjclose",
    "Dividends": "performance.Dividends",
}

GROWTH_COLUMNS = {
    "ID": "id",
    "Company Name": "companyName",
    "Domain": "domain",
    "Industry": "industry",
    "Country": "country",
    "Period": "period",
    "End Date": "endDate",
    "Growth": "growth",
}
