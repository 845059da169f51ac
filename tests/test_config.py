"""
tests/test_config.py

Environment-driven settings and startup validation.
"""

from __future__ import annotations

import pytest

from app import config

_ENV_NAMES = (
    "CACHE_BACKEND",
    "REDIS_URL",
    "COMPETITOR_CACHE_TTL_SECONDS",
    "COMPETITOR_URL_TEMPLATE",
    "COMPETITOR_SCRAPE_MAX_RETRIES",
    "COMPETITOR_SCRAPE_TIMEOUT_SECONDS",
    "LLM_ADAPTER",
    "LLM_API_KEY",
    "OPENAI_API_KEY",
    "LLM_MODEL",
    "LLM_MAX_RETRIES",
    "REPORT_JOB_RETENTION_SECONDS",
)


def _clear_settings_cache() -> None:
    config.get_cache_settings.cache_clear()
    config.get_competitor_scraping_settings.cache_clear()
    config.get_llm_settings.cache_clear()
    config.get_report_job_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    _clear_settings_cache()
    yield
    _clear_settings_cache()


class TestDefaults:
    def test_cache_defaults(self) -> None:
        settings = config.get_cache_settings()

        assert settings.backend == "redis"
        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.competitor_ttl_seconds == 86400

    def test_scraping_defaults_attempt_once(self) -> None:
        settings = config.get_competitor_scraping_settings()

        assert settings.url_template == "https://www.{competitor}.com"
        assert settings.max_retries == 0

    def test_llm_defaults(self) -> None:
        settings = config.get_llm_settings()

        assert settings.adapter == "openai"
        assert settings.api_key is None
        assert settings.model == "gpt-4o-mini"
        assert settings.max_tokens == 4096

    def test_job_retention_default(self) -> None:
        assert config.get_report_job_settings().retention_seconds == 3600


class TestOverrides:
    def test_invalid_integer_falls_back_to_default(self, monkeypatch) -> None:
        monkeypatch.setenv("COMPETITOR_CACHE_TTL_SECONDS", "one day")

        assert config.get_cache_settings().competitor_ttl_seconds == 86400

    def test_values_are_read_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_BACKEND", "Memory")
        monkeypatch.setenv("COMPETITOR_SCRAPE_MAX_RETRIES", "2")
        monkeypatch.setenv("LLM_MODEL", "gpt-4o")

        assert config.get_cache_settings().backend == "memory"
        assert config.get_competitor_scraping_settings().max_retries == 2
        assert config.get_llm_settings().model == "gpt-4o"

    def test_openai_key_is_accepted_as_fallback(self, monkeypatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        assert config.get_llm_settings().api_key == "sk-test"

    def test_tls_redis_url_disables_certificate_checks(self, monkeypatch) -> None:
        monkeypatch.setenv("REDIS_URL", "rediss://cache.example.com:6380/0")

        assert config.get_cache_settings().redis_url == (
            "rediss://cache.example.com:6380/0?ssl_cert_reqs=none"
        )


class TestValidateSettings:
    def test_missing_api_key_is_reported(self) -> None:
        errors = config.validate_settings()

        assert len(errors) == 1
        assert "LLM_API_KEY" in errors[0]

    def test_mock_adapter_needs_no_key(self, monkeypatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "mock")

        assert config.validate_settings() == []

    def test_all_problems_are_reported_together(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_BACKEND", "memcached")
        monkeypatch.setenv("COMPETITOR_URL_TEMPLATE", "https://example.com")
        monkeypatch.setenv("LLM_ADAPTER", "claude")

        errors = config.validate_settings()

        assert len(errors) == 3
        assert any("CACHE_BACKEND" in error for error in errors)
        assert any("COMPETITOR_URL_TEMPLATE" in error for error in errors)
        assert any("LLM_ADAPTER" in error for error in errors)
