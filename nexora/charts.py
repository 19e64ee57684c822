import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from nexora.industry import HEATMAP_COLOR
from nexora.market import leading_float

CHART_HEIGHT = 430

RENEWAL_QUARTER_COLORS = {
    "Q1 2025": "#06b6d4",
    "Q2 2025": "#00432cff",
    "Q3 2025": "#f59e0b",
    "Q4 2025": "#4497efff",
    "Q1 2026": "#8b5cf6",
    "Q2 2026": "#001f3f9f",
}

GAUGE_ZONES = [
    (20, "#ef4444"),
    (40, "#f97316"),
    (60, "#eab308"),
    (80, "#84cc16"),
    (100, "#22c55e"),
]


def format_number(value) -> str:
    if pd.isna(value):
        return "0"
    return f"{value:,.0f}"


def create_bar(data, x, y, title, text_auto=True, horizontal=False, color_map=None):
    if data.empty:
        st.info(f"No data available for {title.lower()}.")
        return
    color = x if color_map else None
    if horizontal:
        fig = px.bar(data, x=y, y=x, orientation="h", title=title, text_auto=text_auto,
                     color=color, color_discrete_map=color_map)
    else:
        fig = px.bar(data, x=x, y=y, title=title, text_auto=text_auto,
                     color=color, color_discrete_map=color_map)
    fig.update_layout(height=CHART_HEIGHT, xaxis_title=None, yaxis_title=None, showlegend=False)
    st.plotly_chart(fig, width="stretch")


def create_pie(slices: list[dict], title):
    if not slices:
        st.info(f"No data available for {title.lower()}.")
        return
    fig = go.Figure(
        go.Pie(
            labels=[s["label"] for s in slices],
            values=[s["value"] for s in slices],
            marker=dict(colors=[s["color"] for s in slices]),
            hole=0.45,
            sort=False,
        )
    )
    fig.update_layout(title=title, height=CHART_HEIGHT)
    st.plotly_chart(fig, width="stretch")


def create_heatmap(data, x, y, title):
    if data.empty:
        st.info(f"No data available for {title.lower()}.")
        return
    fig = px.bar(
        data,
        x=y,
        y=x,
        orientation="h",
        title=title,
        text=data[y].map(lambda v: f"{v}%"),
    )
    fig.update_traces(
        marker_color=[f"rgba(59, 130, 246, {max(v, 5) / 100:.2f})" for v in data[y]],
        marker_line_color=HEATMAP_COLOR,
    )
    fig.update_layout(
        height=max(CHART_HEIGHT, 32 * len(data)),
        xaxis_title=None,
        yaxis_title=None,
        yaxis=dict(autorange="reversed"),
    )
    st.plotly_chart(fig, width="stretch")


def create_price_chart(points: list[dict], color: str, bounds: tuple, candlestick=False):
    if not points:
        st.info("No data available for this time range.")
        return
    df = pd.DataFrame(points)
    if candlestick and {"Open", "High", "Low", "Close"} <= set(df.columns):
        fig = go.Figure(
            go.Candlestick(
                x=df["Time"],
                open=df["Open"],
                high=df["High"],
                low=df["Low"],
                close=df["Close"],
                increasing_line_color="#4CAF50",
                decreasing_line_color="#F44336",
            )
        )
        fig.update_layout(xaxis_rangeslider_visible=False)
    else:
        y = "Close" if "Close" in df.columns else "Price"
        fig = go.Figure(
            go.Scatter(x=df["Time"], y=df[y], mode="lines", fill="tozeroy",
                       line=dict(color=color, width=2))
        )
    fig.update_layout(
        height=CHART_HEIGHT,
        xaxis_title=None,
        yaxis_title=None,
        yaxis=dict(range=list(bounds)),
        xaxis=dict(type="category", nticks=8),
    )
    st.plotly_chart(fig, width="stretch")


def gauge_value(probability) -> float:
    """Leading number of `probability` clamped to 0-100; unparseable is 0."""
    value = leading_float(probability)
    if value is None or pd.isna(value):
        return 0.0
    return min(max(value, 0.0), 100.0)


def needle_rotation(probability) -> int:
    """Five-zone needle angle in degrees for a 0-100 purchase probability."""
    value = gauge_value(probability)
    if value <= 20:
        return -90
    if value <= 40:
        return -45
    if value <= 60:
        return 0
    if value <= 80:
        return 45
    return 90


def create_gauge(probability, title="Purchase Probability"):
    value = gauge_value(probability)
    steps = []
    lower = 0
    for upper, color in GAUGE_ZONES:
        steps.append(dict(range=[lower, upper], color=color))
        lower = upper
    # needle snaps to the zone centre
    zone_value = (needle_rotation(value) + 90) / 180 * 100
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=value,
            number=dict(suffix="%"),
            title=dict(text=title),
            gauge=dict(
                axis=dict(range=[0, 100]),
                bar=dict(color="rgba(0,0,0,0)"),
                steps=steps,
                threshold=dict(line=dict(color="#1f2937", width=4), thickness=0.9, value=zone_value),
            ),
        )
    )
    fig.update_layout(height=260, margin=dict(l=20, r=20, t=50, b=10))
    st.plotly_chart(fig, width="stretch")
