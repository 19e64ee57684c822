"""Widgets shared by every table view: fetch + error banner, search, paging."""

import logging

import pandas as pd
import streamlit as st

from nexora.api_client import ApiClient, ApiError
from nexora.config import get_config
from nexora.models import Row, normalize_rows
from nexora.tables import (
    clamp_page,
    page_count,
    page_slice,
    page_window,
    stringify,
)

log = logging.getLogger(__name__)

HIGHLIGHT_STYLE = "background-color: #fef08a"


@st.cache_data(ttl=get_config().cache_ttl_seconds, show_spinner=False)
def fetch(endpoint: str, *args):
    with ApiClient() as client:
        return getattr(client, endpoint)(*args)


def load(view: str, endpoint: str, *args, model: type[Row] | None = None):
    """Fetch through the cache; on failure remember the error and return []."""
    try:
        with st.spinner("Loading..."):
            data = fetch(endpoint, *args)
    except ApiError as e:
        log.warning("%s: %s failed: %s", view, endpoint, e.message)
        st.session_state[f"{view}_error"] = e.message
        return []
    st.session_state.pop(f"{view}_error", None)
    if model is not None:
        return normalize_rows(model, data)
    return data


def error_banner(view: str) -> None:
    message = st.session_state.get(f"{view}_error")
    if not message:
        return
    col1, col2 = st.columns([6, 1])
    col1.error(f"Error: {message}")
    if col2.button("Dismiss", key=f"{view}_dismiss"):
        st.session_state.pop(f"{view}_error", None)
        st.rerun()


def to_frame(rows: list[dict], columns: list[str] | None = None) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    if columns:
        for column in columns:
            if column not in df.columns:
                df[column] = None
    return df


def search_box(view: str, placeholder: str = "Search...") -> str:
    return st.text_input("Search", key=f"{view}_search", placeholder=placeholder).strip()


def select_filter(label: str, options: list[str], key: str, container=st) -> str:
    choice = container.selectbox(label, ["All"] + options, key=key)
    return "" if choice == "All" else choice


def paginate(df: pd.DataFrame, view: str, state_signature=None) -> pd.DataFrame:
    """Render the pager for `df` and return the rows of the current page."""
    rows_per_page = get_config().rows_per_page
    pages = page_count(len(df), rows_per_page)
    page_key = f"{view}_page"

    # filters changed: back to the first page
    signature_key = f"{view}_signature"
    if state_signature is not None and st.session_state.get(signature_key) != state_signature:
        st.session_state[signature_key] = state_signature
        st.session_state[page_key] = 1

    page = clamp_page(st.session_state.get(page_key, 1), pages)
    st.session_state[page_key] = page

    if pages > 1:
        window = page_window(page, pages)
        cols = st.columns(len(window) + 2)
        if cols[0].button("‹", key=f"{view}_prev", disabled=page == 1):
            st.session_state[page_key] = page - 1
            st.rerun()
        for col, item in zip(cols[1:-1], window):
            if isinstance(item, int):
                if col.button(str(item), key=f"{view}_p{item}", type="primary" if item == page else "secondary"):
                    st.session_state[page_key] = item
                    st.rerun()
            else:
                col.markdown(item)
        if cols[-1].button("›", key=f"{view}_next", disabled=page == pages):
            st.session_state[page_key] = page + 1
            st.rerun()

    start = (page - 1) * rows_per_page
    st.caption(
        f"Showing {min(start + 1, len(df)):,}-{min(start + rows_per_page, len(df)):,} "
        f"of {len(df):,} rows"
    )
    return page_slice(df, page, rows_per_page)


def show_table(df: pd.DataFrame, search: str = "", columns: list[str] | None = None, labels: dict | None = None):
    if df.empty:
        st.info("No records match the current filters.")
        return
    view = df[columns] if columns else df
    display = view.map(stringify)
    if labels:
        display = display.rename(columns=labels)
    if search:
        needle = search.lower()
        styler = display.style.map(lambda v: HIGHLIGHT_STYLE if needle in str(v).lower() else "")
        st.dataframe(styler, width="stretch", hide_index=True)
    else:
        st.dataframe(display, width="stretch", hide_index=True)
