import pandas as pd
import streamlit as st

from nexora.charts import create_gauge, needle_rotation
from nexora.export import download_csv_button, export_filename
from nexora.industry import build_industry_aggregates, store_aggregates
from nexora.models import NtpRow, TechnographicsRow
from nexora.tables import filter_table, order_matches_first, stringify, unique_options
from nexora.views.common import (
    error_banner,
    load,
    paginate,
    search_box,
    select_filter,
    show_table,
    to_frame,
)

VIEW = "technographics"

COMPANY_FIELDS = [
    "companyName",
    "domain",
    "industry",
    "region",
    "employeeSize",
    "revenue",
    "linkedinUrl",
]

COUNTRY_CODES = {
    "UNITED STATES": "US", "USA": "US", "CANADA": "CA", "UNITED KINGDOM": "GB",
    "UK": "GB", "GERMANY": "DE", "FRANCE": "FR", "INDIA": "IN", "JAPAN": "JP",
    "AUSTRALIA": "AU", "BRAZIL": "BR", "MEXICO": "MX", "CHINA": "CN",
    "SINGAPORE": "SG", "SOUTH KOREA": "KR", "KOREA": "KR", "NETHERLANDS": "NL",
    "SWEDEN": "SE", "SWITZERLAND": "CH", "SPAIN": "ES", "ITALY": "IT",
    "IRELAND": "IE", "NEW ZEALAND": "NZ", "UAE": "AE",
    "UNITED ARAB EMIRATES": "AE", "SAUDI ARABIA": "SA", "ISRAEL": "IL",
    "SOUTH AFRICA": "ZA", "RUSSIA": "RU", "POLAND": "PL", "BELGIUM": "BE",
    "AUSTRIA": "AT", "DENMARK": "DK", "NORWAY": "NO", "FINLAND": "FI",
    "PORTUGAL": "PT", "GREECE": "GR", "CZECH REPUBLIC": "CZ", "CZECHIA": "CZ",
    "HUNGARY": "HU", "ROMANIA": "RO", "THAILAND": "TH", "MALAYSIA": "MY",
    "INDONESIA": "ID", "PHILIPPINES": "PH", "VIETNAM": "VN", "PAKISTAN": "PK",
    "BANGLADESH": "BD", "ARGENTINA": "AR", "CHILE": "CL", "COLOMBIA": "CO",
    "PERU": "PE", "TURKEY": "TR", "EGYPT": "EG", "NIGERIA": "NG", "KENYA": "KE",
    "HONG KONG": "HK", "TAIWAN": "TW",
}


def country_code(region) -> str:
    if not region:
        return ""
    name = str(region).strip().upper()
    if name in COUNTRY_CODES:
        return COUNTRY_CODES[name]
    if len(name) == 2 and name.isalpha():
        return name
    return ""


def country_flag(region) -> str:
    code = country_code(region)
    return "".join(chr(0x1F1E6 + ord(c) - ord("A")) for c in code)


def filter_technographics(df: pd.DataFrame, companies: list[str], region: str = "",
                          technology: str = "", category: str = "", search: str = "") -> pd.DataFrame:
    # nothing selected: nothing shown
    if not companies and not (region or technology or category):
        return df.iloc[0:0]
    filters = {
        "companyName": companies,
        "region": region,
        "technology": technology,
        "category": category,
    }
    return order_matches_first(filter_table(df, filters, search), search)


def group_by_company(df: pd.DataFrame) -> pd.DataFrame:
    """One row per company with its detected technologies collected in a list."""
    if df.empty:
        return pd.DataFrame(columns=COMPANY_FIELDS + ["technologies"])
    df = df.copy()
    for field in COMPANY_FIELDS + ["technology"]:
        if field not in df.columns:
            df[field] = None
    df["companyName"] = df["companyName"].map(stringify)
    grouped = df.groupby("companyName", sort=False).agg(
        **{f: (f, "first") for f in COMPANY_FIELDS if f != "companyName"},
        technologies=("technology", lambda s: list(dict.fromkeys(v for v in s if v))),
    )
    return grouped.reset_index()[COMPANY_FIELDS + ["technologies"]]


def ntp_for_company(ntp_rows: list[dict], company: str, category: str = "") -> list[dict]:
    rows = [r for r in ntp_rows if r.get("companyName") == company]
    if category:
        rows = [r for r in rows if r.get("category") == category]
    return rows


def _ntp_panel(company: str, category: str):
    st.markdown(f"#### {company}")
    ntp_view = f"{VIEW}_ntp"
    ntp_rows = load(ntp_view, "ntp", model=NtpRow)
    error_banner(ntp_view)
    rows = ntp_for_company(ntp_rows, company, category)
    if not rows:
        st.caption("No NTP data for this company.")
        return
    for i, row in enumerate(rows):
        with st.container(border=True):
            st.markdown(f"**{row.get('technology') or 'N/A'}** · {row.get('category') or 'N/A'}")
            st.caption(
                f"Prediction: {row.get('purchasePrediction') or 'N/A'} "
                f"(needle {needle_rotation(row.get('purchaseProbability'))}°)"
            )
            create_gauge(row.get("purchaseProbability"))
            with st.expander("Analysis"):
                st.write(row.get("ntpAnalysis") or "N/A")


def render():
    st.subheader("Technographics")
    rows = load(VIEW, "technographics", model=TechnographicsRow)
    error_banner(VIEW)
    if rows:
        store_aggregates(build_industry_aggregates(rows))
    df = to_frame(rows, COMPANY_FIELDS + ["category", "technology"])

    search = search_box(VIEW, "Search by Company Name")
    cols = st.columns(4)
    companies = cols[0].multiselect(
        "Company Name", unique_options(df, "companyName"), key=f"{VIEW}_companies"
    )
    region = select_filter("Region", unique_options(df, "region"), f"{VIEW}_region", cols[1])
    category = select_filter("Category", unique_options(df, "category"), f"{VIEW}_category", cols[2])
    technology = select_filter(
        "Technology", unique_options(df, "technology"), f"{VIEW}_technology", cols[3]
    )

    filtered = filter_technographics(df, companies, region, technology, category, search)
    if not companies and not (region or technology or category):
        st.info("Select a company or a filter to view technographics.")
        return

    grouped = group_by_company(filtered)
    download_csv_button(grouped, None, export_filename("technographics_data"), key=f"{VIEW}_csv")
    display = grouped.copy()
    display["region"] = display["region"].map(lambda r: f"{country_flag(r)} {stringify(r)}".strip())

    table_col, panel_col = st.columns([3, 2])
    with table_col:
        page = paginate(display, VIEW, (tuple(companies), region, category, technology, search))
        show_table(page, search)
    with panel_col:
        names = list(grouped["companyName"])
        if names:
            selected = st.selectbox("Company details", names, key=f"{VIEW}_selected")
            _ntp_panel(selected, category)
