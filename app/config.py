"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_ALLOWED_CACHE_BACKENDS = {"redis", "memory"}
_ALLOWED_LLM_ADAPTERS = {"openai", "mock"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class CacheSettings:
    """
    Cache store settings for scraped competitor records.
    """

    backend: str = "redis"
    redis_url: str = "redis://localhost:6379/0"
    competitor_ttl_seconds: int = 86400


@dataclass(frozen=True)
class CompetitorScrapingSettings:
    """
    Runtime settings for competitor website scraping.
    """

    url_template: str = "https://www.{competitor}.com"
    user_agent: str = "RivalReportBot/1.0"
    timeout_seconds: float = 15.0
    max_retries: int = 0
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class LLMSettings:
    """
    Narrative generation settings.
    """

    adapter: str = "openai"
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    max_tokens: int = 4096
    base_url: str | None = None
    max_retries: int = 0


@dataclass(frozen=True)
class ReportJobSettings:
    """
    In-memory report job bookkeeping settings.
    """

    retention_seconds: int = 3600


def _normalize_redis_url(url: str) -> str:
    # Managed Redis over TLS ships self-signed certificate chains.
    if url.startswith("rediss://") and "ssl_cert_reqs" not in url:
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}ssl_cert_reqs=none"
    return url


@lru_cache(maxsize=1)
def get_cache_settings() -> CacheSettings:
    """
    Return cached cache-store settings from environment variables.
    """

    return CacheSettings(
        backend=_get_str_env("CACHE_BACKEND", "redis").lower(),
        redis_url=_normalize_redis_url(_get_str_env("REDIS_URL", "redis://localhost:6379/0")),
        competitor_ttl_seconds=max(1, _get_int_env("COMPETITOR_CACHE_TTL_SECONDS", 86400)),
    )


@lru_cache(maxsize=1)
def get_competitor_scraping_settings() -> CompetitorScrapingSettings:
    """
    Return cached scraper settings from environment variables.
    """

    return CompetitorScrapingSettings(
        url_template=_get_str_env("COMPETITOR_URL_TEMPLATE", "https://www.{competitor}.com"),
        user_agent=_get_str_env("COMPETITOR_SCRAPE_USER_AGENT", "RivalReportBot/1.0"),
        timeout_seconds=max(1.0, _get_float_env("COMPETITOR_SCRAPE_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("COMPETITOR_SCRAPE_MAX_RETRIES", 0)),
        backoff_initial_seconds=max(
            0.1,
            _get_float_env("COMPETITOR_SCRAPE_BACKOFF_INITIAL_SECONDS", 0.5),
        ),
        backoff_multiplier=max(1.0, _get_float_env("COMPETITOR_SCRAPE_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Return cached narrative generation settings from environment variables.
    """

    return LLMSettings(
        adapter=_get_str_env("LLM_ADAPTER", "openai").lower(),
        api_key=_get_optional_str_env("LLM_API_KEY") or _get_optional_str_env("OPENAI_API_KEY"),
        model=_get_str_env("LLM_MODEL", "gpt-4o-mini"),
        max_tokens=max(1, _get_int_env("LLM_MAX_TOKENS", 4096)),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        max_retries=max(0, _get_int_env("LLM_MAX_RETRIES", 0)),
    )


@lru_cache(maxsize=1)
def get_report_job_settings() -> ReportJobSettings:
    """
    Return report job retention settings.
    """

    return ReportJobSettings(
        retention_seconds=max(1, _get_int_env("REPORT_JOB_RETENTION_SECONDS", 3600)),
    )


def validate_settings() -> list[str]:
    """
    Collect every invalid or missing setting so all problems surface at once.
    """

    errors: list[str] = []

    cache = get_cache_settings()
    if cache.backend not in _ALLOWED_CACHE_BACKENDS:
        errors.append(
            f"CACHE_BACKEND='{cache.backend}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_CACHE_BACKENDS)}."
        )

    scraping = get_competitor_scraping_settings()
    if "{competitor}" not in scraping.url_template:
        errors.append("COMPETITOR_URL_TEMPLATE must contain the '{competitor}' placeholder.")

    llm = get_llm_settings()
    if llm.adapter not in _ALLOWED_LLM_ADAPTERS:
        errors.append(
            f"LLM_ADAPTER='{llm.adapter}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_LLM_ADAPTERS)}."
        )
    elif llm.adapter != "mock" and not llm.api_key:
        errors.append(
            "LLM API key is not set. Provide LLM_API_KEY or OPENAI_API_KEY, "
            "or set LLM_ADAPTER=mock."
        )

    return errors
