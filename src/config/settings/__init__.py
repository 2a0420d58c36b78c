"""Agregador de settings do gateway.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    AuthSettings,
    BaseSettings,
    Environment,
    get_auth_settings,
    get_base_settings,
)

# Webhook de saída
from config.settings.webhook import (
    WebhookSettings,
    get_webhook_settings,
)

# Channel-specific settings
from config.settings.whatsapp import (
    DEFAULT_CHAT_SUFFIX,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    # Constants
    "DEFAULT_CHAT_SUFFIX",
    # Base
    "AuthSettings",
    "BaseSettings",
    "Environment",
    # Webhook
    "WebhookSettings",
    # Channels
    "WhatsAppSettings",
    "get_auth_settings",
    "get_base_settings",
    "get_webhook_settings",
    "get_whatsapp_settings",
]
