"""Testes das settings do gateway (carga de ambiente e validação)."""

from __future__ import annotations

import pytest

from config.settings import (
    AuthSettings,
    BaseSettings,
    WebhookSettings,
    WhatsAppSettings,
)
from config.settings.base.auth import _load_auth_from_env
from config.settings.base.core import _load_base_from_env
from config.settings.webhook import _load_from_env as load_webhook_from_env
from config.settings.whatsapp import _load_from_env as load_whatsapp_from_env


class TestBaseSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("ENVIRONMENT", "SERVICE_NAME", "PORT", "MAX_BODY_BYTES"):
            monkeypatch.delenv(name, raising=False)

        settings = _load_base_from_env()

        assert settings.environment == "development"
        assert settings.service_name == "whatsapp-gateway"
        assert settings.port == 3000
        assert settings.max_body_bytes == 50 * 1024 * 1024
        assert settings.validate() == []

    def test_environment_aliases(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        assert _load_base_from_env().is_production is True

        monkeypatch.setenv("ENVIRONMENT", "stage")
        assert _load_base_from_env().environment == "staging"

    def test_invalid_port(self) -> None:
        errors = BaseSettings(port=70000).validate()
        assert any("PORT" in error for error in errors)


class TestAuthSettings:
    def test_secret_has_no_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("API_SECRET", raising=False)

        settings = _load_auth_from_env()

        assert settings.is_configured is False
        assert settings.validate() == ["API_SECRET não configurado"]

    def test_short_secret_is_rejected(self) -> None:
        errors = AuthSettings(api_secret="curto").validate()
        assert len(errors) == 1
        assert "16" in errors[0]

    def test_secret_is_not_in_repr(self) -> None:
        assert "super-secret-value" not in repr(AuthSettings(api_secret="super-secret-value"))


class TestWebhookSettings:
    def test_missing_url_disables_dispatch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WEBHOOK_URL", raising=False)

        settings = load_webhook_from_env()

        assert settings.is_enabled is False
        assert settings.timeout_seconds == 10.0
        assert settings.max_in_flight == 100
        assert settings.validate() == []

    def test_loads_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEBHOOK_URL", " https://receiver.example/hook ")
        monkeypatch.setenv("WEBHOOK_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("WEBHOOK_MAX_IN_FLIGHT", "7")

        settings = load_webhook_from_env()

        assert settings.url == "https://receiver.example/hook"
        assert settings.timeout_seconds == 2.5
        assert settings.max_in_flight == 7

    def test_invalid_values(self) -> None:
        errors = WebhookSettings(url="ftp://x", timeout_seconds=0, max_in_flight=0).validate()
        assert len(errors) == 3


class TestWhatsAppSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "WHATSAPP_BRIDGE_URL",
            "WHATSAPP_CONNECT_TIMEOUT_SECONDS",
            "WHATSAPP_COMMAND_TIMEOUT_SECONDS",
            "WHATSAPP_CHAT_SUFFIX",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = load_whatsapp_from_env()

        assert settings.bridge_url == "ws://localhost:8765"
        assert settings.connect_timeout_seconds == 120.0
        assert settings.command_timeout_seconds == 60.0
        assert settings.chat_suffix == "@c.us"
        assert settings.validate() == []

    def test_invalid_bridge_url_and_suffix(self) -> None:
        errors = WhatsAppSettings(bridge_url="http://bridge", chat_suffix="c.us").validate()
        assert any("WHATSAPP_BRIDGE_URL" in error for error in errors)
        assert any("WHATSAPP_CHAT_SUFFIX" in error for error in errors)
