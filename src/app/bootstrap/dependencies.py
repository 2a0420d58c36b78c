"""Factories do gateway — criação das implementações concretas.

Conecta dispatcher, factory do cliente WhatsApp-Web e registry a partir
das settings de ambiente. Chamadas uma vez pelo lifespan da aplicação.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.webhook.dispatcher import WebhookDispatcher
from app.infra.whatsapp.bridge_client import BridgeClientFactory
from app.sessions import SessionRegistry
from config.settings import get_webhook_settings, get_whatsapp_settings

if TYPE_CHECKING:
    from app.protocols.webhook_dispatcher import WebhookDispatcherProtocol
    from app.protocols.whatsapp_client import WhatsAppClientFactoryProtocol

logger = logging.getLogger(__name__)


def create_webhook_dispatcher() -> WebhookDispatcher:
    """Cria dispatcher com WEBHOOK_URL/WEBHOOK_TIMEOUT_SECONDS do ambiente."""
    settings = get_webhook_settings()
    logger.info(
        "webhook_dispatcher_created",
        extra={
            "enabled": settings.is_enabled,
            "timeout_seconds": settings.timeout_seconds,
            "max_in_flight": settings.max_in_flight,
        },
    )
    return WebhookDispatcher(settings)


def create_client_factory() -> BridgeClientFactory:
    """Cria factory de clientes apontando para WHATSAPP_BRIDGE_URL."""
    settings = get_whatsapp_settings()
    logger.info("whatsapp_client_factory_created", extra={"backend": "bridge"})
    return BridgeClientFactory(settings)


def create_session_registry(
    client_factory: WhatsAppClientFactoryProtocol,
    dispatcher: WebhookDispatcherProtocol,
) -> SessionRegistry:
    """Cria o registry de sessões.

    Args:
        client_factory: Factory do cliente WhatsApp-Web
        dispatcher: Dispatcher de eventos
    """
    return SessionRegistry(
        client_factory,
        dispatcher,
        chat_suffix=get_whatsapp_settings().chat_suffix,
    )
