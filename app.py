import logging

import streamlit as st

from nexora.api_client import ApiClient
from nexora.auth import init_session, login, logout, signup, start_session
from nexora.config import configure_logging
from nexora.perf import monitor
from nexora.views import DEFAULT_DASHBOARD, DEFAULT_SECTION, MENUS, get_view

st.set_page_config(
    page_title="Nexora Insights Dashboard",
    page_icon="📊",
    layout="wide",
)

configure_logging()
log = logging.getLogger("nexora.app")


def init_navigation():
    if "dashboard" not in st.session_state:
        st.session_state.dashboard = DEFAULT_DASHBOARD
    if "section" not in st.session_state:
        st.session_state.section = DEFAULT_SECTION


def on_dashboard_change():
    # switching dashboards always lands on its summary
    st.session_state.section = "Summary"


def login_page():
    st.title("Nexora Insights")
    login_tab, signup_tab = st.tabs(["Login", "Sign Up"])

    with login_tab:
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login")
        if submitted:
            with ApiClient() as client:
                result = login(client, username, password)
            if result.ok:
                start_session(result)
                st.rerun()
            else:
                st.error(result.message)

    with signup_tab:
        with st.form("signup_form"):
            new_username = st.text_input("Username", key="signup_username")
            email = st.text_input("Email")
            new_password = st.text_input("Password", type="password", key="signup_password")
            created = st.form_submit_button("Create account")
        if created:
            with ApiClient() as client:
                result = signup(client, new_username, email, new_password)
            if result.ok:
                st.success(result.message)
            else:
                st.error(result.message)


def sidebar():
    st.sidebar.header("Nexora Insights")
    st.sidebar.caption(f"Signed in as {st.session_state.username or 'user'}")
    st.sidebar.selectbox(
        "Dashboard",
        list(MENUS),
        key="dashboard",
        on_change=on_dashboard_change,
    )
    sections = list(MENUS[st.session_state.dashboard])
    if st.session_state.section not in sections:
        st.session_state.section = "Summary"
    st.sidebar.radio("Menu", sections, key="section")

    st.sidebar.markdown("---")
    if st.sidebar.button("Logout"):
        logout()
        st.rerun()


monitor.clear()
init_session()
init_navigation()

if not st.session_state.authenticated:
    login_page()
    st.stop()

sidebar()

render = get_view(st.session_state.dashboard, st.session_state.section)
try:
    with monitor.measure(f"render {st.session_state.section}"):
        render()
except Exception as e:
    log.exception("Rendering %s failed", st.session_state.section)
    st.error(f"Unable to render this section. {e}")
    st.stop()

monitor.log_summary()
