"""Testes da validação de settings no startup."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.bootstrap import collect_settings_errors, validate_runtime_settings
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_webhook_settings,
    get_whatsapp_settings,
)
from fsm import VALID_TRANSITIONS, SessionState

_CACHED = (get_auth_settings, get_base_settings, get_webhook_settings, get_whatsapp_settings)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    for getter in _CACHED:
        getter.cache_clear()
    yield
    for getter in _CACHED:
        getter.cache_clear()


def test_missing_secret_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("API_SECRET", raising=False)

    assert "auth: API_SECRET não configurado" in collect_settings_errors()


def test_development_only_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("API_SECRET", raising=False)

    validate_runtime_settings()


def test_production_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("API_SECRET", raising=False)

    with pytest.raises(RuntimeError, match="API_SECRET"):
        validate_runtime_settings()


def test_production_with_valid_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("API_SECRET", "a-long-enough-production-secret")
    monkeypatch.setenv("WEBHOOK_URL", "https://receiver.example/hook")
    monkeypatch.delenv("WHATSAPP_BRIDGE_URL", raising=False)

    validate_runtime_settings()


def test_broken_transition_map_blocks_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("API_SECRET", "a-long-enough-production-secret")
    monkeypatch.delitem(VALID_TRANSITIONS, SessionState.CONNECTED)

    assert "fsm: Estado CONNECTED ausente em VALID_TRANSITIONS" in collect_settings_errors()
    with pytest.raises(RuntimeError, match="fsm"):
        validate_runtime_settings()
