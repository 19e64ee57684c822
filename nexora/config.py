"""Configuration management via environment variables.

Reads from a .env file (via pydantic-settings) with sensible defaults.
Every value can be overridden with an environment variable of the same
name, e.g. ``API_BASE_URL=http://api.internal:5000``.
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # REST backend serving every /api/* endpoint
    api_base_url: str = "http://localhost:5000"
    request_timeout: float = 30.0

    # st.cache_data TTL for fetched datasets
    cache_ttl_seconds: int = 300

    # Table paging on the client
    rows_per_page: int = 25

    # Server-side paging for /api/ntp, /api/technographics, /api/buyergroups
    page_fetch_limit: int = 50
    max_fetch_pages: int = 200

    # Real-time quote refresh on the 1D market chart
    quote_poll_seconds: int = 5

    log_level: str = "INFO"

    @field_validator("api_base_url", "log_level", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").strip()
        return v

    @field_validator("api_base_url")
    @classmethod
    def drop_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_config: Settings | None = None


def get_config() -> Settings:
    """Get or create the shared Settings singleton."""
    global _config
    if _config is None:
        _config = Settings()
    return _config


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_config().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
