"""Settings específicas de WhatsApp.

Configurações da bridge WhatsApp-Web (processo externo que roda o browser)
e da normalização de destinos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Sufixo de chat individual do WhatsApp-Web
DEFAULT_CHAT_SUFFIX: str = "@c.us"
DEFAULT_BRIDGE_URL: str = "ws://localhost:8765"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp-Web.

    Attributes:
        bridge_url: URL WebSocket da bridge WhatsApp-Web
        connect_timeout_seconds: Timeout do handshake de criação do cliente
        command_timeout_seconds: Timeout de cada comando (envio, decrypt, logout)
        chat_suffix: Sufixo anexado a destinos sem '@'
        headless: Se a bridge deve abrir o browser sem interface
    """

    bridge_url: str = DEFAULT_BRIDGE_URL
    connect_timeout_seconds: float = 120.0
    command_timeout_seconds: float = 60.0
    chat_suffix: str = DEFAULT_CHAT_SUFFIX
    headless: bool = True

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.bridge_url.startswith(("ws://", "wss://")):
            errors.append("WHATSAPP_BRIDGE_URL deve começar com ws:// ou wss://")

        if self.connect_timeout_seconds <= 0:
            errors.append("WHATSAPP_CONNECT_TIMEOUT_SECONDS deve ser > 0")

        if self.command_timeout_seconds <= 0:
            errors.append("WHATSAPP_COMMAND_TIMEOUT_SECONDS deve ser > 0")

        if not self.chat_suffix.startswith("@"):
            errors.append("WHATSAPP_CHAT_SUFFIX deve começar com '@'")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        bridge_url=os.getenv("WHATSAPP_BRIDGE_URL", DEFAULT_BRIDGE_URL),
        connect_timeout_seconds=float(
            os.getenv("WHATSAPP_CONNECT_TIMEOUT_SECONDS", "120")
        ),
        command_timeout_seconds=float(
            os.getenv("WHATSAPP_COMMAND_TIMEOUT_SECONDS", "60")
        ),
        chat_suffix=os.getenv("WHATSAPP_CHAT_SUFFIX", DEFAULT_CHAT_SUFFIX),
        headless=os.getenv("WHATSAPP_HEADLESS", "true").lower() in ("true", "1", "yes"),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
