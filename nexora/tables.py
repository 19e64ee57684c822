import html
import math
import re
from typing import Any

import numpy as np
import pandas as pd

ELLIPSIS = "…"


def stringify(value: Any) -> str:
    if value is None or value is pd.NA or value is pd.NaT:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, dict):
        return " ".join(stringify(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value)
    if isinstance(value, np.generic):
        return stringify(value.item())
    return str(value)


def row_matches_search(row: dict, term: str) -> bool:
    needle = (term or "").lower()
    return any(needle in stringify(value).lower() for value in row.values())


def search_mask(df: pd.DataFrame, term: str) -> pd.Series:
    if not term:
        return pd.Series(True, index=df.index)
    matches = [row_matches_search(row, term) for row in df.to_dict(orient="records")]
    return pd.Series(matches, index=df.index, dtype=bool)


def apply_filters(df: pd.DataFrame, filters: dict) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    for column, selected in filters.items():
        if selected is None or selected == "" or selected == []:
            continue
        if column not in df.columns:
            return df.iloc[0:0]
        values = df[column].map(stringify)
        if isinstance(selected, (list, tuple, set)):
            mask &= values.isin([str(s) for s in selected])
        else:
            mask &= values == str(selected)
    return df[mask]


def filter_table(df: pd.DataFrame, filters: dict | None = None, search: str = "") -> pd.DataFrame:
    """Apply column filters, then keep the rows matching `search`."""
    filtered = apply_filters(df, filters or {})
    if not search:
        return filtered
    matches = search_mask(filtered, search)
    return filtered[matches]


def order_matches_first(df: pd.DataFrame, search: str) -> pd.DataFrame:
    if not search or df.empty:
        return df
    matches = search_mask(df, search)
    return pd.concat([df[matches], df[~matches]])


def unique_options(df: pd.DataFrame, column: str) -> list[str]:
    if df.empty or column not in df.columns:
        return []
    values = {stringify(v).strip() for v in df[column]}
    values.discard("")
    return sorted(values)


def highlight_text(text: Any, term: str) -> str:
    text = stringify(text)
    if not term:
        return html.escape(text)
    pattern = re.compile(re.escape(term), re.IGNORECASE)
    out, pos = [], 0
    for match in pattern.finditer(text):
        out.append(html.escape(text[pos : match.start()]))
        out.append(f"<mark>{html.escape(match.group(0))}</mark>")
        pos = match.end()
    out.append(html.escape(text[pos:]))
    return "".join(out)


# Pagination


def page_count(total_rows: int, rows_per_page: int) -> int:
    if total_rows <= 0 or rows_per_page <= 0:
        return 0
    return math.ceil(total_rows / rows_per_page)


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))


def page_slice(df: pd.DataFrame, page: int, rows_per_page: int) -> pd.DataFrame:
    page = clamp_page(page, page_count(len(df), rows_per_page))
    start = (page - 1) * rows_per_page
    return df.iloc[start : start + rows_per_page]


def page_window(current: int, total: int) -> list:
    if total <= 7:
        return list(range(1, total + 1))
    pages: list = [1]
    lo, hi = max(2, current - 1), min(total - 1, current + 1)
    if lo > 2:
        pages.append(ELLIPSIS)
    pages.extend(range(lo, hi + 1))
    if hi < total - 1:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages
