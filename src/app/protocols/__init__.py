"""Protocolos e contratos do core da aplicação."""

from .models import (
    ATTACHMENT_FIELDS,
    EventKind,
    MessagePayload,
    SessionHints,
    SessionSummary,
    WebhookEvent,
)
from .webhook_dispatcher import WebhookDispatcherProtocol
from .whatsapp_client import (
    ClientEventHandler,
    WhatsAppClientFactoryProtocol,
    WhatsAppClientProtocol,
)

__all__ = [
    "ATTACHMENT_FIELDS",
    "ClientEventHandler",
    "EventKind",
    "MessagePayload",
    "SessionHints",
    "SessionSummary",
    "WebhookDispatcherProtocol",
    "WebhookEvent",
    "WhatsAppClientFactoryProtocol",
    "WhatsAppClientProtocol",
]
