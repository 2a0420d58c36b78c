"""Protocolo do dispatcher de webhook."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import WebhookEvent


class WebhookDispatcherProtocol(Protocol):
    """Entrega best-effort de eventos; nunca bloqueia nem levanta."""

    def emit(self, event: WebhookEvent, webhook_url: str | None = None) -> None: ...

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda entregas pendentes (shutdown)."""
        ...
