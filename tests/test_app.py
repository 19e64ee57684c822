from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP = str(Path(__file__).resolve().parent.parent / "app.py")

pytestmark = pytest.mark.ui


def test_login_page_shown_when_signed_out():
    at = AppTest.from_file(APP, default_timeout=30).run()
    assert not at.exception
    assert at.title[0].value == "Nexora Insights"
    assert at.session_state["authenticated"] is False
    assert at.session_state["dashboard"] == "Martech"
    assert at.session_state["section"] == "Technographics"


def test_login_without_credentials_shows_error():
    at = AppTest.from_file(APP, default_timeout=30).run()
    at.button[0].click().run()
    assert at.error[0].value == "Username and password are required"
    assert at.session_state["authenticated"] is False


def test_signed_in_user_gets_sidebar_menu():
    at = AppTest.from_file(APP, default_timeout=30)
    at.session_state["authenticated"] = True
    at.session_state["username"] = "demo"
    at.session_state["dashboard"] = "Market"
    at.session_state["section"] = "Nope"
    at.run()
    assert at.sidebar.radio[0].value == "Summary"
    assert at.sidebar.selectbox[0].value == "Market"
