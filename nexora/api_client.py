"""HTTP client for the dashboard's REST backend.

Every view reads through one of the endpoint helpers below. Failures are
raised as ApiError so the views can show an inline banner and fall back
to an empty table.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from nexora.config import get_config
from nexora.perf import monitor

log = logging.getLogger(__name__)


class ApiError(Exception):
    """A backend call failed (transport error or HTTP status >= 400)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP error! status: {response.status_code}"


def unwrap_rows(payload: Any) -> list[dict]:
    """Accept a bare JSON array or a {data: [...], pagination: {...}} envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    raise ApiError("Unexpected response shape: expected a list of rows")


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        config = get_config()
        self.base_url = (base_url or config.api_base_url).rstrip("/")
        self.page_limit = config.page_fetch_limit
        self.max_pages = config.max_fetch_pages
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout or config.request_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -- transport -------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        with monitor.measure(f"{method} {path}"):
            try:
                return self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                log.warning("%s %s failed: %s", method, path, e)
                raise ApiError(f"Error connecting to server: {e}") from e

    def get_json(self, path: str, params: dict | None = None) -> Any:
        response = self._request("GET", path, params=params)
        if response.status_code >= 400:
            raise ApiError(_error_message(response), response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {path}", response.status_code) from e

    def get_text(self, path: str) -> str:
        response = self._request("GET", path)
        if response.status_code >= 400:
            raise ApiError(_error_message(response), response.status_code)
        return response.text

    def post_json(self, path: str, payload: dict) -> tuple[int, Any]:
        """POST and hand back (status, body); 4xx bodies carry a `message`."""
        response = self._request("POST", path, json=payload)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}
        return response.status_code, body

    def get_rows(self, path: str, params: dict | None = None) -> list[dict]:
        return unwrap_rows(self.get_json(path, params=params))

    def get_all_pages(self, path: str, limit: int | None = None) -> list[dict]:
        limit = limit or self.page_limit
        rows: list[dict] = []
        page = 1
        while page <= self.max_pages:
            payload = self.get_json(path, params={"page": page, "limit": limit})
            rows.extend(unwrap_rows(payload))
            pagination = payload.get("pagination") if isinstance(payload, dict) else None
            if not pagination or not pagination.get("hasMore"):
                break
            page += 1
        else:
            log.warning("Stopped paging %s after %d pages", path, self.max_pages)
        log.info("Fetched %d rows from %s", len(rows), path)
        return rows

    # -- martech endpoints -----------------------------------------------

    def intent(self) -> list[dict]:
        return self.get_rows("/api/intent")

    def ntp(self) -> list[dict]:
        return self.get_all_pages("/api/ntp")

    def technographics(self) -> list[dict]:
        return self.get_all_pages("/api/technographics")

    def renewal_intelligence(self, company: str | None = None) -> list[dict]:
        params = {"companyName": company} if company else None
        return self.get_rows("/api/renewal-intelligence", params=params)

    def product_catalogue(self, year: int) -> list[dict]:
        return self.get_rows("/api/product-catalogue", params={"year": year})

    # -- market endpoints ------------------------------------------------

    def financial_wide(self) -> list[dict]:
        return self.get_rows("/api/financial/wide")

    def financial_long(self) -> list[dict]:
        return self.get_rows("/api/financial/long")

    def growth(self) -> list[dict]:
        return self.get_rows("/api/growth")

    def buyer_groups(self) -> list[dict]:
        return self.get_all_pages("/api/buyergroups")

    def mutual_funds(self) -> list[dict]:
        return self.get_rows("/api/mutualfunds")

    def stock_history(self, company_id, time_range: str) -> list[dict]:
        return self.get_rows(f"/api/stock/{company_id}/{time_range}")

    def stock_quote(self, company_id) -> dict:
        return self.get_json(f"/api/stock/quote/{company_id}")

    # -- org charts ------------------------------------------------------

    def org_chart_companies(self) -> list[str]:
        return self.get_json("/api/org-chart/companies").get("companies", [])

    def org_chart_categories(self) -> list[str]:
        return self.get_json("/api/org-chart/categories").get("categories", [])

    def org_chart_person_details(self) -> dict[str, list[dict]]:
        return self.get_json("/api/org-chart/person-details")

    def org_chart_html(self, company_name: str) -> str:
        return self.get_text(f"/api/org-chart/{quote(company_name, safe='')}")

    def generate_org_charts(self, companies: list[str]) -> dict:
        status, body = self.post_json(
            "/api/org-chart/generate-selected", {"companies": companies}
        )
        if status >= 400:
            raise ApiError(body.get("message") or "Chart generation failed", status)
        return body

    # -- auth --------------------------------------------------------------

    def login(self, username: str, password: str) -> tuple[int, Any]:
        return self.post_json("/api/auth/login", {"username": username, "password": password})

    def signup(self, username: str, email: str, password: str) -> tuple[int, Any]:
        return self.post_json(
            "/api/auth/signup", {"username": username, "email": email, "password": password}
        )
