import streamlit as st

from nexora.charts import create_heatmap, create_pie, format_number
from nexora.industry import (
    MAX_SELECTED_INDUSTRIES,
    available_industries,
    build_industry_aggregates,
    default_region,
    get_aggregates,
    industry_pie_data,
    intent_counts,
    region_heatmap,
    store_aggregates,
)
from nexora.models import INTENT_STATUSES, IntentRow, TechnographicsRow
from nexora.sankey import (
    MAX_SELECTED_CATEGORIES,
    MAX_VISIBLE_HEIGHT,
    build_sankey_data,
    content_height,
    default_selected_categories,
    needs_scroll,
    sankey_figure,
    toggle_category,
)
from nexora.views.common import error_banner, load

VIEW = "martech_summary"


def _intent_table():
    intent_view = f"{VIEW}_intent"
    counts = intent_counts(load(intent_view, "intent", model=IntentRow))
    error_banner(intent_view)
    cols = st.columns(len(INTENT_STATUSES) + 1)
    for col, status in zip(cols, INTENT_STATUSES + ["Total"]):
        col.metric(status, format_number(counts[status]))


def _sankey(rows):
    st.markdown("#### Technology Adoption")
    all_categories = build_sankey_data(rows).all_categories
    key = f"{VIEW}_categories"
    if key not in st.session_state:
        st.session_state[key] = default_selected_categories(all_categories)
    selected = st.multiselect(
        "Categories",
        all_categories,
        key=key,
        max_selections=MAX_SELECTED_CATEGORIES,
    )
    data = build_sankey_data(rows, selected)
    if not data.nodes:
        st.info("No data available for technology adoption.")
        return

    expanded_key = f"{VIEW}_expanded"
    expanded = st.session_state.setdefault(expanded_key, set())
    expanded &= {c.id for c in data.categories}

    cols = st.columns(max(len(data.categories), 1))
    for col, category in zip(cols, data.categories):
        arrow = "▼" if category.id in expanded else "▶"
        if col.button(f"{arrow} {category.label}", key=f"{VIEW}_toggle_{category.id}"):
            st.session_state[expanded_key] = toggle_category(expanded, category.id)
            st.rerun()

    hover_options = ["None"] + [n.id for n in data.nodes if n.kind != "technology" or n.category in expanded]
    hovered = st.selectbox("Highlight node", hover_options, key=f"{VIEW}_hover")
    fig = sankey_figure(data, expanded, None if hovered == "None" else hovered)

    height = content_height(data, expanded)
    if needs_scroll(height):
        with st.container(height=MAX_VISIBLE_HEIGHT):
            st.plotly_chart(fig, width="stretch")
    else:
        st.plotly_chart(fig, width="stretch")


def _industry_pie(aggregates):
    options = available_industries(aggregates.industry_data)
    selected = st.multiselect(
        "Industries",
        options,
        key=f"{VIEW}_industries",
        max_selections=MAX_SELECTED_INDUSTRIES,
        placeholder="Top 10 industries",
    )
    create_pie(industry_pie_data(aggregates.industry_data, selected), "Industry Distribution")


def _region_heatmap(aggregates):
    regions = aggregates.available_regions
    if not regions:
        st.info("No data available for regional adoption.")
        return
    region = st.selectbox(
        "Region",
        regions,
        index=regions.index(default_region(regions)),
        key=f"{VIEW}_region",
    )
    create_heatmap(
        region_heatmap(aggregates.technology_data, region),
        "category",
        "percentage",
        f"Technology Adoption in {region}",
    )


def render():
    st.subheader("Martech Summary")
    rows = load(VIEW, "technographics", model=TechnographicsRow)
    error_banner(VIEW)
    if rows:
        store_aggregates(build_industry_aggregates(rows))
    aggregates = get_aggregates()

    _intent_table()
    _sankey(rows)
    col1, col2 = st.columns(2)
    with col1:
        _industry_pie(aggregates)
    with col2:
        _region_heatmap(aggregates)
