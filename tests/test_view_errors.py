"""Failed backend fetches surface as dismissible banners inside each view."""

import pytest
from streamlit.testing.v1 import AppTest

from nexora.api_client import ApiError
from nexora.views import common

pytestmark = pytest.mark.ui

TECHNOGRAPHICS = [
    {"companyName": "Acme", "industry": "Retail", "region": "India", "category": "AI/ML", "technology": "PyTorch"},
]


class FakeClient:
    """Stands in for ApiClient: `responses` maps endpoint -> rows or an ApiError."""

    responses: dict = {}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def __getattr__(self, endpoint):
        def call(*args):
            result = self.responses.get(endpoint, ApiError("HTTP error! status: 500", 500))
            if isinstance(result, ApiError):
                raise result
            return result

        return call


@pytest.fixture
def backend(monkeypatch):
    common.fetch.clear()
    FakeClient.responses = {}
    monkeypatch.setattr(common, "ApiClient", FakeClient)
    yield FakeClient.responses
    common.fetch.clear()


def intent_app():
    from nexora.views import intent

    intent.render()


def technographics_app():
    from nexora.views import technographics

    technographics.render()


def buying_group_app():
    from nexora.views import buying_group

    buying_group.render()


def banner_app():
    import streamlit as st

    from nexora.views.common import error_banner

    if "seeded" not in st.session_state:
        st.session_state.seeded = True
        st.session_state["demo_error"] = "HTTP error! status: 503"
    error_banner("demo")
    st.write("content")


def error_texts(at):
    return [e.value for e in at.error]


def test_failed_fetch_shows_banner_and_empty_table(backend):
    at = AppTest.from_function(intent_app, default_timeout=30).run()
    assert not at.exception
    assert error_texts(at) == ["Error: HTTP error! status: 500"]
    assert at.session_state["intent_error"] == "HTTP error! status: 500"
    assert "No records match the current filters." in [i.value for i in at.info]
    assert len(at.dataframe) == 0


def test_successful_fetch_clears_stored_error(backend):
    backend["intent"] = [{"companyName": "Acme", "intentStatus": "High"}]
    at = AppTest.from_function(intent_app, default_timeout=30)
    at.session_state["intent_error"] = "stale"
    at.run()
    assert not at.error
    assert "intent_error" not in at.session_state
    assert len(at.dataframe) == 1


def test_dismiss_clears_banner(backend):
    at = AppTest.from_function(banner_app, default_timeout=30).run()
    assert error_texts(at) == ["Error: HTTP error! status: 503"]
    at.button(key="demo_dismiss").click().run()
    assert not at.error
    assert "demo_error" not in at.session_state
    assert at.markdown[0].value == "content"


def test_ntp_panel_failure_has_its_own_banner(backend):
    backend["technographics"] = TECHNOGRAPHICS
    backend["ntp"] = ApiError("HTTP error! status: 502", 502)
    at = AppTest.from_function(technographics_app, default_timeout=30).run()
    at.multiselect(key="technographics_companies").select("Acme").run()
    assert not at.exception
    assert error_texts(at) == ["Error: HTTP error! status: 502"]
    assert at.session_state["technographics_ntp_error"] == "HTTP error! status: 502"
    assert "technographics_error" not in at.session_state


def test_buying_group_person_details_failure_is_shown(backend):
    backend["org_chart_companies"] = []
    backend["org_chart_person_details"] = ApiError("HTTP error! status: 504", 504)
    at = AppTest.from_function(buying_group_app, default_timeout=30).run()
    assert not at.exception
    assert error_texts(at) == ["Error: HTTP error! status: 504"]
    assert "No companies available." in [i.value for i in at.info]
