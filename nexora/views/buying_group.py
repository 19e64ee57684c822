import logging

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from nexora.api_client import ApiClient, ApiError
from nexora.orgchart import (
    companies_from_people,
    org_chart_figure,
    parse_org_chart_csv,
    parse_person_details,
    sanitize_filename,
)
from nexora.views.common import error_banner, fetch, load

log = logging.getLogger(__name__)

VIEW = "buying_group"
PEOPLE_COLUMNS = {
    "name": "Name",
    "designation": "Designation",
    "category": "Category",
    "reportsTo": "Reports To",
    "email": "Email",
    "linkedin": "LinkedIn",
}


def people_frame(people) -> pd.DataFrame:
    df = pd.DataFrame([p.model_dump() for p in people], columns=list(PEOPLE_COLUMNS))
    return df.rename(columns=PEOPLE_COLUMNS)


def _org_chart_html(company: str) -> str | None:
    try:
        with st.spinner("Generating org chart..."):
            return fetch("org_chart_html", company)
    except ApiError as e:
        log.warning("Org chart for %s unavailable: %s", company, e.message)
        return None


def _generate_panel(companies: list[str]):
    with st.expander("Generate org charts"):
        selected = st.multiselect("Companies", companies, key=f"{VIEW}_generate")
        if st.button("Generate", key=f"{VIEW}_generate_btn", disabled=not selected):
            try:
                with ApiClient() as client:
                    result = client.generate_org_charts(selected)
            except ApiError as e:
                st.error(e.message)
                return
            fetch.clear()
            st.success(
                result.get("message")
                or f"{result.get('newChartsGenerated', 0)} generated, "
                f"{result.get('chartsSkipped', 0)} skipped"
            )


def render():
    st.subheader("Buying Group")

    uploaded = st.file_uploader("Buying group CSV", type="csv", key=f"{VIEW}_upload")
    if uploaded is not None:
        try:
            people_by_company = parse_org_chart_csv(uploaded.getvalue().decode("utf-8-sig"))
        except (ValueError, UnicodeDecodeError, pd.errors.ParserError) as e:
            st.error(f"Unable to read the CSV file. {e}")
            return
        companies = companies_from_people(people_by_company)
    else:
        companies = load(VIEW, "org_chart_companies")
        people_by_company = parse_person_details(load(f"{VIEW}_people", "org_chart_person_details") or {})
        error_banner(VIEW)
        error_banner(f"{VIEW}_people")

    if not companies:
        st.info("No companies available.")
        return

    company = st.selectbox("Company Name", companies, key=f"{VIEW}_company")
    people = people_by_company.get(company, [])

    html = _org_chart_html(company) if uploaded is None else None
    if html:
        components.html(html, height=540, scrolling=True)
        st.download_button(
            "Download chart",
            html,
            file_name=f"{sanitize_filename(company)}.html",
            mime="text/html",
            key=f"{VIEW}_html",
        )
    elif people:
        st.plotly_chart(org_chart_figure(people, company), width="stretch")
    else:
        st.error("Failed to generate org chart. Please try again.")

    if people:
        categories = load(f"{VIEW}_categories", "org_chart_categories") if uploaded is None else []
        error_banner(f"{VIEW}_categories")
        if not categories:
            categories = sorted({p.category for p in people if p.category != "N/A"})
        shown = st.multiselect("Category", categories, key=f"{VIEW}_category")
        if shown:
            people = [p for p in people if p.category in shown]
        st.dataframe(
            people_frame(people),
            width="stretch",
            hide_index=True,
            column_config={"LinkedIn": st.column_config.LinkColumn("LinkedIn")},
        )

    if uploaded is None:
        _generate_panel(companies)
