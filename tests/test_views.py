"""Tests for the per-view filtering and shaping functions."""

import pandas as pd
import pytest

from nexora.views import MENUS, get_view, intent, market_summary
from nexora.views.financial import filter_financial
from nexora.views.intent import filter_intent
from nexora.views.ntp import filter_ntp
from nexora.views.product_catalogue import filter_products
from nexora.views.renewal import filter_renewals, quarter_counts, quarter_sort_key
from nexora.views.stock_performance import filter_stock_performance, flatten_performance
from nexora.views.technographics import (
    country_code,
    country_flag,
    filter_technographics,
    group_by_company,
    ntp_for_company,
)


def test_menus():
    assert list(MENUS["Martech"])[:6] == [
        "Technographics",
        "Renewal Intelligence",
        "Intent",
        "Buying Group",
        "NTP®",
        "Product Catalogue",
    ]
    assert list(MENUS["Market"]) == [
        "Summary",
        "Financial",
        "Stock Performance",
        "Buyer Group",
        "Growth",
        "Mutual Fund",
    ]
    assert get_view("Martech", "Intent") is intent.render
    assert get_view("Market", "Nope") is market_summary.render


def test_filter_intent_example(intent_rows):
    df = pd.DataFrame(intent_rows)
    result = filter_intent(df, ["High"], "")
    assert result.to_dict(orient="records") == [{"companyName": "Acme", "intentStatus": "High"}]
    assert len(filter_intent(df, [], "")) == 2
    assert list(filter_intent(df, [], "zet")["companyName"]) == ["Zeta"]


def test_filter_ntp_exact_match():
    df = pd.DataFrame(
        [
            {"companyName": "Acme", "category": "Cloud", "technology": "AWS", "purchaseProbability": 80.0},
            {"companyName": "Acme", "category": "Cloud", "technology": "AWS Lambda", "purchaseProbability": 20.0},
        ]
    )
    assert len(filter_ntp(df, {"technology": "AWS"})) == 1
    assert len(filter_ntp(df, {"companyName": "", "category": "Cloud"})) == 2
    assert len(filter_ntp(df, {}, "80")) == 1


def test_technographics_requires_a_filter(technographics_rows):
    df = pd.DataFrame(technographics_rows)
    assert filter_technographics(df, []).empty
    assert len(filter_technographics(df, ["Acme"])) == 3
    assert len(filter_technographics(df, [], category="Big Data")) == 2
    assert list(filter_technographics(df, ["Acme", "Zeta"], technology="Spark")["companyName"]) == [
        "Acme",
        "Zeta",
    ]


def test_group_by_company(technographics_rows):
    grouped = group_by_company(pd.DataFrame(technographics_rows))
    acme = grouped[grouped["companyName"] == "Acme"].iloc[0]
    assert acme["technologies"] == ["TensorFlow", "PyTorch", "Spark"]
    assert acme["region"] == "India"
    assert list(grouped["companyName"]) == ["Acme", "Zeta", "Orbit"]
    assert grouped[grouped["companyName"] == "Orbit"].iloc[0]["technologies"] == []


def test_group_by_company_empty():
    assert "technologies" in group_by_company(pd.DataFrame()).columns


def test_country_flags():
    assert country_code("India") == "IN"
    assert country_code(" united kingdom ") == "GB"
    assert country_code("de") == "DE"
    assert country_code("Atlantis") == ""
    assert country_flag("India") == "\U0001F1EE\U0001F1F3"
    assert country_flag(None) == ""


def test_ntp_for_company():
    rows = [
        {"companyName": "Acme", "category": "Cloud"},
        {"companyName": "Acme", "category": "AI/ML"},
        {"companyName": "Zeta", "category": "Cloud"},
    ]
    assert len(ntp_for_company(rows, "Acme")) == 2
    assert ntp_for_company(rows, "Acme", "Cloud") == [rows[0]]


def test_quarter_ordering():
    assert quarter_sort_key("Q1 2026") < quarter_sort_key("Q4 2025")
    assert quarter_sort_key("Q1 2025") < quarter_sort_key("Q2 2025")
    assert quarter_sort_key("Q2 2025") < quarter_sort_key("Unknown")

    df = pd.DataFrame({"qtr": ["Q3 2025", "Q1 2025", "Q2 2026", "Q1 2025", None]})
    counts = quarter_counts(df)
    assert list(counts["qtr"]) == ["Q2 2026", "Q1 2025", "Q3 2025", "Unknown"]
    assert list(counts["count"]) == [1, 2, 1, 1]
    assert counts.iloc[0]["color"] == "#001f3f9f"
    assert counts.iloc[-1]["color"] == "#9ca3af"


def test_filter_financial_search_and_buckets():
    df = pd.DataFrame(
        [
            {"companyName": "Acme", "revenueGrowth": 12, "dailyPerformance": {"close": 101.5}},
            {"companyName": "Zeta", "revenueGrowth": 3, "dailyPerformance": {}},
        ]
    )
    assert list(filter_financial(df, {"stockPerformance": "High"})["companyName"]) == ["Acme"]
    assert list(filter_financial(df, {}, "101.5")["companyName"]) == ["Acme"]
    assert list(filter_financial(df, {"stockPerformance": "Low"}, "zeta")["companyName"]) == ["Zeta"]


@pytest.fixture
def long_rows():
    return pd.DataFrame(
        [
            {"id": 1, "companyName": "Acme", "performanceType": "Daily",
             "performance": {"Date": "2025-01-02", "Close": 10}},
            {"id": 1, "companyName": "Acme", "performanceType": "Weekly",
             "performance": {"Date": "2025-01-06", "Close": 11}},
        ]
    )


def test_filter_stock_performance_by_type(long_rows):
    daily = filter_stock_performance(long_rows, "Daily", {})
    assert list(daily["performanceType"]) == ["Daily"]
    assert filter_stock_performance(long_rows, "Quarterly", {}).empty
    assert len(filter_stock_performance(long_rows, "Weekly", {}, "2025-01-06")) == 1


def test_flatten_performance(long_rows):
    table = flatten_performance(long_rows)
    assert list(table.columns)[:5] == ["ID", "Company Name", "Domain", "Industry", "Performance Type"]
    assert list(table["Close"]) == [10, 11]
    assert table["Volume"].isna().all()


def test_market_summary_poll_failure_keeps_chart(monkeypatch):
    from nexora.api_client import ApiError

    class FailingClient:
        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def stock_quote(self, company_id):
            raise ApiError("HTTP error! status: 503", 503)

    monkeypatch.setattr(market_summary, "ApiClient", FailingClient)
    chart = [{"Time": "14:30", "Close": 10}]
    assert market_summary.poll_quote(7, chart) is chart


def test_filter_products_orders_name_matches_first():
    df = pd.DataFrame(
        [
            {"prodName": "Ledger", "category": "Finance", "subCategory": "ERP", "description": "cloud books"},
            {"prodName": "Cloud Vault", "category": "Storage", "subCategory": "Backup", "description": "vault"},
            {"prodName": "Mailer", "category": "Marketing", "subCategory": "Email", "description": "campaigns"},
        ]
    )
    result = filter_products(df, {"prodName": "", "category": "", "subCategory": ""}, "cloud")
    assert set(result["prodName"]) == {"Ledger", "Cloud Vault"}
    assert filter_products(df, {"category": "Marketing"}).iloc[0]["prodName"] == "Mailer"


def test_filter_renewals():
    df = pd.DataFrame(
        [
            {"companyName": "Acme", "product": "CRM", "qtr": "Q1 2025"},
            {"companyName": "Acme", "product": "ERP", "qtr": "Q2 2025"},
        ]
    )
    assert list(filter_renewals(df, product="ERP")["qtr"]) == ["Q2 2025"]
    assert len(filter_renewals(df)) == 2
    assert filter_renewals(df, qtr="Q4 2025").empty
