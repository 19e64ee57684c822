"""Tests for the REST client, with the backend faked by httpx.MockTransport."""

import json

import httpx
import pytest

from nexora.api_client import ApiError, unwrap_rows


def test_unwrap_rows():
    assert unwrap_rows([{"a": 1}]) == [{"a": 1}]
    assert unwrap_rows({"data": [{"a": 1}], "pagination": {}}) == [{"a": 1}]
    with pytest.raises(ApiError):
        unwrap_rows({"message": "nope"})


def test_get_rows_plain_array(make_client):
    def handler(request):
        assert request.url.path == "/api/intent"
        return httpx.Response(200, json=[{"companyName": "Acme"}])

    assert make_client(handler).intent() == [{"companyName": "Acme"}]


def test_paginated_endpoint_follows_has_more(make_client):
    seen = []

    def handler(request):
        page = int(request.url.params["page"])
        seen.append((page, request.url.params["limit"]))
        return httpx.Response(
            200,
            json={
                "data": [{"companyName": f"C{page}"}],
                "pagination": {"currentPage": page, "hasMore": page < 3},
            },
        )

    rows = make_client(handler).ntp()
    assert [r["companyName"] for r in rows] == ["C1", "C2", "C3"]
    assert seen == [(1, "50"), (2, "50"), (3, "50")]


def test_http_error_raises_api_error_with_message(make_client):
    client = make_client(lambda request: httpx.Response(500, json={"message": "boom"}))
    with pytest.raises(ApiError) as exc:
        client.growth()
    assert exc.value.status_code == 500
    assert exc.value.message == "boom"


def test_http_error_without_body(make_client):
    client = make_client(lambda request: httpx.Response(404, text="missing"))
    with pytest.raises(ApiError, match="HTTP error! status: 404"):
        client.financial_wide()


def test_transport_error_raises_api_error(make_client):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ApiError) as exc:
        make_client(handler).intent()
    assert exc.value.status_code is None


def test_query_parameters(make_client):
    captured = {}

    def handler(request):
        captured[request.url.path] = dict(request.url.params)
        return httpx.Response(200, json=[])

    client = make_client(handler)
    client.renewal_intelligence("Acme & Co")
    client.product_catalogue(2026)
    assert captured["/api/renewal-intelligence"] == {"companyName": "Acme & Co"}
    assert captured["/api/product-catalogue"] == {"year": "2026"}


def test_org_chart_html_encodes_company(make_client):
    def handler(request):
        assert request.url.raw_path == b"/api/org-chart/Acme%20%26%20Co%2FEU"
        return httpx.Response(200, text="<html>chart</html>")

    assert make_client(handler).org_chart_html("Acme & Co/EU") == "<html>chart</html>"


def test_generate_org_charts(make_client):
    def handler(request):
        if not json.loads(request.read())["companies"]:
            return httpx.Response(400, json={"message": "No companies selected"})
        return httpx.Response(200, json={"success": True, "newChartsGenerated": 1, "chartsSkipped": 0})

    client = make_client(handler)
    assert client.generate_org_charts(["Acme"])["newChartsGenerated"] == 1
    with pytest.raises(ApiError, match="No companies selected"):
        client.generate_org_charts([])


def test_stock_endpoints(make_client):
    def handler(request):
        if request.url.path == "/api/stock/7/1D":
            return httpx.Response(200, json=[{"Time": "2025-01-05T14:30:00", "Close": 10}])
        assert request.url.path == "/api/stock/quote/7"
        return httpx.Response(200, json={"Time": "2025-01-05T14:31:00", "Close": 11})

    client = make_client(handler)
    assert client.stock_history(7, "1D")[0]["Close"] == 10
    assert client.stock_quote(7)["Close"] == 11
