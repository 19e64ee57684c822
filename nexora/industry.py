"""Industry and regional adoption aggregates shared across Martech views."""

from dataclasses import dataclass, field

import pandas as pd
import streamlit as st

from nexora.models import INTENT_STATUSES

PIE_PALETTE = [
    "#64B5F6",
    "#1565C0",
    "#4CAF50",
    "#FF9800",
    "#FDD835",
    "#00897B",
    "#673AB7",
    "#E91E63",
    "#FF5722",
    "#9C27B0",
]
MAX_SELECTED_INDUSTRIES = 10
TOP_INDUSTRIES = 10
EXCLUDED_INDUSTRIES = {"n/a", "not found"}
HEATMAP_COLOR = "rgb(59, 130, 246)"

SESSION_KEY = "industry_aggregates"


def _or_default(series: pd.Series, default: str) -> pd.Series:
    return series.fillna("").astype(str).replace("", default)


@dataclass
class IndustryAggregates:
    industry_data: list[dict] = field(default_factory=list)  # [{"label", "value"}]
    technology_data: dict[str, dict[str, int]] = field(default_factory=dict)
    available_regions: list[str] = field(default_factory=list)


def build_industry_aggregates(rows: list[dict]) -> IndustryAggregates:
    if not rows:
        return IndustryAggregates()

    df = pd.DataFrame(rows)
    for column in ("industry", "region", "category"):
        if column not in df.columns:
            df[column] = None
    df["industry"] = _or_default(df["industry"], "Other")
    df["region"] = _or_default(df["region"], "Unknown")
    df["category"] = _or_default(df["category"], "Other")

    industry_counts = df.groupby("industry", sort=False).size()
    industry_data = [{"label": k, "value": int(v)} for k, v in industry_counts.items()]

    technology_data: dict[str, dict[str, int]] = {}
    for region, group in df.groupby("region", sort=False):
        counts = group.groupby("category", sort=False).size()
        total = int(counts.sum())
        technology_data[region] = {
            category: round(int(count) / total * 100) if total else 0
            for category, count in counts.items()
        }

    return IndustryAggregates(
        industry_data=industry_data,
        technology_data=technology_data,
        available_regions=sorted(technology_data),
    )


def store_aggregates(aggregates: IndustryAggregates) -> None:
    st.session_state[SESSION_KEY] = aggregates


def get_aggregates() -> IndustryAggregates:
    return st.session_state.get(SESSION_KEY) or IndustryAggregates()


def _displayable(industry_data: list[dict]) -> list[dict]:
    return [d for d in industry_data if str(d["label"]).lower() not in EXCLUDED_INDUSTRIES]


def available_industries(industry_data: list[dict]) -> list[str]:
    ranked = sorted(_displayable(industry_data), key=lambda d: d["value"], reverse=True)
    return [d["label"] for d in ranked]


def industry_pie_data(industry_data: list[dict], selected: list[str] | None = None) -> list[dict]:
    """Slices for the industry pie: the selection, or the top ten by count."""
    data = _displayable(industry_data)
    if selected:
        data = [d for d in data if d["label"] in selected[:MAX_SELECTED_INDUSTRIES]]
    else:
        data = sorted(data, key=lambda d: d["value"], reverse=True)[:TOP_INDUSTRIES]
    return [
        {**d, "color": PIE_PALETTE[i % len(PIE_PALETTE)]}
        for i, d in enumerate(data)
    ]


def default_region(regions: list[str]) -> str | None:
    if not regions:
        return None
    return "India" if "India" in regions else regions[0]


def region_heatmap(technology_data: dict, region: str | None) -> pd.DataFrame:
    shares = technology_data.get(region or "", {})
    df = pd.DataFrame(
        [{"category": c, "percentage": p} for c, p in shares.items()],
        columns=["category", "percentage"],
    )
    return df.sort_values("percentage", ascending=False, kind="stable").reset_index(drop=True)


def intent_counts(rows: list[dict]) -> dict[str, int]:
    counts = {status: 0 for status in INTENT_STATUSES}
    for row in rows:
        status = row.get("intentStatus")
        if status in counts:
            counts[status] += 1
    counts["Total"] = len(rows)
    return counts
