import logging
import re

import pandas as pd

log = logging.getLogger(__name__)

TIME_RANGES = ["1D", "5D", "1M", "6M", "YTD", "1Y", "5Y"]
PERFORMANCE_TYPES = ["Daily", "Weekly", "Monthly", "Quarterly"]
PERFORMANCE_FIELDS = [
    "dailyPerformance",
    "weeklyPerformance",
    "monthlyPerformance",
    "quarterlyPerformance",
]
GAIN_COLOR = "#4CAF50"
LOSS_COLOR = "#F44336"

# filter name -> (row field, {bucket: (low exclusive, high inclusive)})
BUCKET_FILTERS = {
    "stockPerformance": (
        "revenueGrowth",
        {"High": (10, None), "Medium": (5, 10), "Low": (None, 5)},
    ),
    "buyerHolder": (
        "marketCap",
        {"Institutional": (10, None), "Retail": (None, 10)},
    ),
    "mutualFundHolders": (
        "marketCap",
        {"High": (20, None), "Medium": (5, 20), "Low": (None, 5)},
    ),
    "growth": (
        "profitGrowth",
        {"High": (15, None), "Medium": (8, 15), "Low": (None, 8)},
    ),
}

BUCKET_LABELS = {
    "stockPerformance": "Stock Performance",
    "buyerHolder": "Buyer Holder",
    "mutualFundHolders": "Mutual Fund Holders",
    "growth": "Growth",
}


def parse_numeric(value) -> float:
    """Numbers pass through; strings like "$20.63" keep only digits, '.' and '-'."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return 0.0
    match = re.match(r"-?\d*\.?\d*", re.sub(r"[^0-9.\-]", "", value))
    try:
        return float(match.group(0))
    except (ValueError, AttributeError):
        return 0.0


def leading_float(value) -> float | None:
    # parseFloat semantics: leading numeric prefix, else None
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = re.match(r"\s*([-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)", str(value))
    return float(match.group(1)) if match else None


def sanitize_financial_rows(rows: list[dict]) -> list[dict]:
    out = []
    for row in rows:
        row = dict(row)
        for name in PERFORMANCE_FIELDS:
            if not isinstance(row.get(name), dict):
                row[name] = {}
        daily = dict(row["dailyPerformance"])
        for key in ("open", "high", "low", "close"):
            if key in daily:
                daily[key] = parse_numeric(daily[key])
        row["dailyPerformance"] = daily
        out.append(row)
    return out


def in_bucket(value, bounds: tuple) -> bool:
    number = leading_float(value)
    # a missing or zero metric never lands in a bucket
    if not value or number is None:
        return False
    low, high = bounds
    if low is not None and not number > low:
        return False
    if high is not None and not number <= high:
        return False
    return True


def bucket_mask(df: pd.DataFrame, selections: dict[str, str]) -> pd.Series:
    mask = pd.Series(True, index=df.index)
    for name, bucket in selections.items():
        if not bucket:
            continue
        field, buckets = BUCKET_FILTERS[name]
        if field not in df.columns:
            return pd.Series(False, index=df.index)
        mask &= df[field].map(lambda v: in_bucket(v, buckets[bucket]))
    return mask


def to_timestamp(value) -> pd.Timestamp | None:
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            return pd.to_datetime(value, unit="ms")
        return pd.to_datetime(value)
    except (ValueError, TypeError) as e:
        log.debug("Unparseable time %r: %s", value, e)
        return None


def format_time(value, time_range: str) -> str:
    ts = to_timestamp(value)
    if ts is None:
        return ""
    if time_range == "1D":
        return ts.strftime("%H:%M")
    if time_range == "5D":
        hour = ts.hour % 12 or 12
        return f"{ts.strftime('%b')} {ts.day}, {hour}:{ts.strftime('%M %p')}"
    if time_range in ("1M", "3M"):
        return f"{ts.strftime('%b')} {ts.day}"
    return ts.strftime("%b %Y")


def format_chart(points: list[dict], time_range: str) -> list[dict]:
    return [{**p, "Time": format_time(p.get("Time"), time_range)} for p in points]


def merge_quote(chart: list[dict], quote: dict) -> list[dict]:
    """Fold a real-time quote into a 1D chart: same minute replaces, new minute appends."""
    if not chart:
        return chart
    point = {**quote, "Time": format_time(quote.get("Time"), "1D")}
    if chart[-1].get("Time") != point["Time"]:
        return chart + [point]
    return chart[:-1] + [point]


def price_bounds(chart: list[dict]) -> tuple[float, float]:
    prices = [p["Close"] for p in chart if p.get("Close")]
    if not prices:
        return 0.0, 100.0
    return min(prices) * 0.99, max(prices) * 1.01


def is_gain(chart: list[dict]) -> bool:
    if len(chart) < 2:
        return False
    last = chart[-1].get("Close") or chart[-1].get("Price") or 0
    first = chart[0].get("Open") or chart[0].get("Close") or 0
    return last >= first


def trend_color(chart: list[dict]) -> str:
    return GAIN_COLOR if is_gain(chart) else LOSS_COLOR
