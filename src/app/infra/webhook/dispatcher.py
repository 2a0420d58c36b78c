"""Dispatcher de webhook — entrega best-effort de eventos de sessão.

Cada evento vira uma task própria (fire-and-forget) que faz um único POST
com timeout fixo e loga o resultado. Sem retry, sem fila: acima de
`max_in_flight` entregas simultâneas o evento é descartado com warning.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import httpx

from app.observability import record_latency, record_webhook_delivery
from config.settings import WebhookSettings, get_webhook_settings
from utils.errors import DispatchError

if TYPE_CHECKING:
    from app.protocols.models import WebhookEvent

logger = logging.getLogger(__name__)


class WebhookDispatcher:
    """Implementa WebhookDispatcherProtocol sobre httpx."""

    def __init__(
        self,
        settings: WebhookSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializa dispatcher.

        Args:
            settings: WebhookSettings. Se None, carrega do ambiente.
            transport: Transport httpx alternativo (testes).
        """
        self._settings = settings or get_webhook_settings()
        self._transport = transport
        self._active_tasks: set[asyncio.Task[None]] = set()

    @property
    def default_url(self) -> str:
        return self._settings.url

    @property
    def pending(self) -> int:
        """Entregas em andamento."""
        return len(self._active_tasks)

    def emit(self, event: WebhookEvent, webhook_url: str | None = None) -> None:
        """Agenda a entrega do evento sem bloquear o chamador.

        Args:
            event: Evento a enviar
            webhook_url: Override por sessão; cai no WEBHOOK_URL padrão
        """
        target = webhook_url or self._settings.url
        if not target:
            logger.info(
                "webhook_skipped",
                extra={
                    "event": event.event,
                    "session_id": event.session_id,
                    "reason": "url_not_configured",
                },
            )
            record_webhook_delivery(event.event, "skipped", event.session_id)
            return

        if len(self._active_tasks) >= self._settings.max_in_flight:
            logger.warning(
                "webhook_shed",
                extra={
                    "event": event.event,
                    "session_id": event.session_id,
                    "active_tasks": len(self._active_tasks),
                },
            )
            record_webhook_delivery(event.event, "shed", event.session_id)
            return

        task = asyncio.create_task(self._deliver_safe(event, target))
        self._active_tasks.add(task)
        task.add_done_callback(self._on_task_done)

    async def deliver(self, event: WebhookEvent, url: str) -> int:
        """Executa um único POST do evento.

        Returns:
            Status HTTP do receptor.

        Raises:
            DispatchError: timeout, erro de transporte ou status >= 400.
        """
        started_at = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    url,
                    json=event.to_payload(),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.TimeoutException as exc:
            raise DispatchError("webhook_timeout") from exc
        except httpx.HTTPError as exc:
            raise DispatchError(f"webhook_transport_error: {type(exc).__name__}") from exc
        except httpx.InvalidURL as exc:
            raise DispatchError("webhook_invalid_url") from exc
        except Exception as exc:
            raise DispatchError(f"webhook_unexpected_error: {type(exc).__name__}") from exc

        record_latency(
            "webhook_dispatcher",
            "post",
            (time.perf_counter() - started_at) * 1000,
            session_id=event.session_id,
        )
        if response.status_code >= 400:
            raise DispatchError(f"webhook_rejected: HTTP {response.status_code}")
        return response.status_code

    async def _deliver_safe(self, event: WebhookEvent, url: str) -> None:
        """Entrega em background; falhas são apenas logadas."""
        try:
            status_code = await self.deliver(event, url)
        except DispatchError as exc:
            logger.error(
                "webhook_failed",
                extra={
                    "event": event.event,
                    "session_id": event.session_id,
                    "target_host": _target_host(url),
                    "error": str(exc),
                },
            )
            record_webhook_delivery(event.event, "failed", event.session_id)
            return

        logger.info(
            "webhook_sent",
            extra={
                "event": event.event,
                "session_id": event.session_id,
                "status_code": status_code,
            },
        )
        record_webhook_delivery(event.event, "sent", event.session_id, status_code)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._active_tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "webhook_task_failed",
                    extra={
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._active_tasks),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda entregas pendentes durante o shutdown."""
        if not self._active_tasks:
            return

        pending_now = list(self._active_tasks)
        logger.info(
            "webhook_shutdown_wait",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning("webhook_shutdown_cancelled", extra={"cancelled_tasks": len(pending)})


def _target_host(url: str) -> str | None:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None
