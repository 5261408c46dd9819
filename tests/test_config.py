import pytest
from pydantic import ValidationError

from savemetoilet.config import load_settings
from savemetoilet.providers.factory import build_collector


def test_load_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("SEOUL_API_KEY", raising=False)
    settings = load_settings()

    assert settings.base_url == "http://openapi.seoul.go.kr:8088"
    assert settings.toilet_service == "SearchPublicToiletPOIService"
    assert settings.max_attempts == 3
    assert settings.retry_delay_seconds == 2.0
    assert settings.page_size == 1000
    assert settings.pacing_seconds == 0.1
    assert settings.max_response_bytes == 5 * 1024 * 1024


def test_load_settings_reads_env(monkeypatch) -> None:
    monkeypatch.setenv("SEOUL_API_KEY", "abc123")
    monkeypatch.setenv("SEOUL_API_PAGE_SIZE", "500")
    monkeypatch.setenv("SEOUL_API_RETRY_DELAY_SECONDS", "0")
    settings = load_settings()

    assert settings.key.get_secret_value() == "abc123"
    assert settings.page_size == 500
    assert settings.retry_delay_seconds == 0.0


def test_api_key_is_hidden_from_repr(monkeypatch) -> None:
    monkeypatch.setenv("SEOUL_API_KEY", "abc123")
    settings = load_settings()

    assert "abc123" not in repr(settings)
    assert "abc123" not in str(settings.model_dump())


def test_page_size_is_bounded(monkeypatch) -> None:
    monkeypatch.setenv("SEOUL_API_PAGE_SIZE", "1001")
    with pytest.raises(ValidationError):
        load_settings()


def test_build_collector_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("SEOUL_API_PAGE_SIZE", "250")
    collector = build_collector(load_settings())

    ranges = collector.plan_ranges(600)

    assert [(item.start, item.end) for item in ranges] == [(1, 250), (251, 500), (501, 600)]
