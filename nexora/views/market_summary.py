import logging

import streamlit as st

from nexora.api_client import ApiClient, ApiError
from nexora.charts import create_price_chart
from nexora.config import get_config
from nexora.market import (
    TIME_RANGES,
    format_chart,
    is_gain,
    merge_quote,
    parse_numeric,
    price_bounds,
    sanitize_financial_rows,
    trend_color,
)
from nexora.views.common import error_banner, load

log = logging.getLogger(__name__)

VIEW = "market_summary"
CHART_KEY = f"{VIEW}_chart"
HISTORY_VIEW = f"{VIEW}_history"


def poll_quote(company_id, chart: list[dict]) -> list[dict]:
    """Merge the latest quote into `chart`; a failed poll leaves it unchanged."""
    try:
        with ApiClient() as client:
            quote = client.stock_quote(company_id)
    except ApiError as e:
        log.error("Real-time poll failed: %s", e.message)
        return chart
    if not isinstance(quote, dict):
        log.error("Real-time poll returned %s, expected an object", type(quote).__name__)
        return chart
    return merge_quote(chart, quote)


def _draw_chart(company_id, time_range: str, candlestick: bool):
    state = st.session_state[CHART_KEY]
    if time_range == "1D" and not state.pop("fresh", False):
        state["points"] = poll_quote(company_id, state["points"])

    points = state["points"]
    if len(points) > 1:
        first = parse_numeric(points[0].get("Open") or points[0].get("Close"))
        last = parse_numeric(points[-1].get("Close") or points[-1].get("Price"))
        change = last - first
        pct = change / first * 100 if first else 0
        st.metric(
            "Price",
            f"{last:,.2f}",
            f"{change:+,.2f} ({pct:+.2f}%)",
            delta_color="normal" if is_gain(points) else "inverse",
        )
    create_price_chart(points, trend_color(points), price_bounds(points), candlestick)


def render():
    st.subheader("Market Summary")
    companies = [r for r in sanitize_financial_rows(load(VIEW, "financial_wide")) if r.get("id") is not None]
    error_banner(VIEW)
    if not companies:
        st.info("No companies available.")
        return

    col1, col2, col3 = st.columns([2, 3, 1])
    index = col1.selectbox(
        "Company",
        range(len(companies)),
        format_func=lambda i: companies[i].get("companyName") or str(companies[i]["id"]),
        key=f"{VIEW}_company",
    )
    company = companies[index]
    time_range = col2.radio("Range", TIME_RANGES, horizontal=True, key=f"{VIEW}_range")
    candlestick = col3.toggle("Candles", key=f"{VIEW}_candles")

    signature = (company["id"], time_range)
    state = st.session_state.get(CHART_KEY)
    if not state or state.get("signature") != signature:
        history = load(HISTORY_VIEW, "stock_history", company["id"], time_range)
        st.session_state[CHART_KEY] = {
            "signature": signature,
            "points": format_chart(history, time_range),
            "fresh": True,
        }

    error_banner(HISTORY_VIEW)
    run_every = get_config().quote_poll_seconds if time_range == "1D" else None
    st.fragment(_draw_chart, run_every=run_every)(company["id"], time_range, candlestick)
