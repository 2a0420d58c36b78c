"""Connection Adapter — dono de um cliente WhatsApp-Web subjacente.

Traduz os três canais de callback do cliente (QR, estado, mensagem) em
eventos de webhook e transições da sessão, e expõe as ações de saída.

Fluxo:
1. connect(): pede o cliente à factory (handshake longo, browser)
2. on_qr / on_state_change / on_message: chamados pelo cliente, em ordem
3. send_text / send_file: normalizam destino e delegam ao cliente
4. logout / close: liberam o cliente; seguros após desconexão
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from app.coordinators.whatsapp.inbound.extractor import (
    extract_message_payload,
    has_attachment,
)
from app.observability import record_latency
from app.protocols.models import WebhookEvent
from config.settings import DEFAULT_CHAT_SUFFIX
from fsm import SessionState
from utils.errors import ClientConnectionError, DeliveryError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.webhook_dispatcher import WebhookDispatcherProtocol
    from app.protocols.whatsapp_client import (
        WhatsAppClientFactoryProtocol,
        WhatsAppClientProtocol,
    )
    from app.sessions.models import Session

logger = logging.getLogger(__name__)

STATE_CONNECTED = "CONNECTED"
DISCONNECT_STATES = frozenset({"DISCONNECTED", "CONFLICT"})


def normalize_chat_id(destination: str, suffix: str = DEFAULT_CHAT_SUFFIX) -> str:
    """Anexa o sufixo de chat a destinos sem '@'; demais passam intactos."""
    destination = destination.strip()
    if "@" in destination:
        return destination
    return f"{destination}{suffix}"


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class ConnectionAdapter:
    """Implementa ClientEventHandler para uma única sessão."""

    def __init__(
        self,
        session: Session,
        client_factory: WhatsAppClientFactoryProtocol,
        dispatcher: WebhookDispatcherProtocol,
        *,
        on_terminated: Callable[[Session], None],
        chat_suffix: str = DEFAULT_CHAT_SUFFIX,
    ) -> None:
        """Inicializa adapter.

        Args:
            session: Sessão dona deste adapter
            client_factory: Factory do cliente subjacente
            dispatcher: Dispatcher de webhook
            on_terminated: Chamado quando o cliente reporta desconexão terminal
            chat_suffix: Sufixo anexado a destinos sem '@'
        """
        self._session = session
        self._factory = client_factory
        self._dispatcher = dispatcher
        self._on_terminated = on_terminated
        self._chat_suffix = chat_suffix
        self._client: WhatsAppClientProtocol | None = None
        self._closed = False
        self._close_task: asyncio.Task[None] | None = None

    @property
    def session_id(self) -> str:
        return self._session.session_id

    @property
    def is_ready(self) -> bool:
        """Cliente construído e ainda não liberado."""
        return self._client is not None and not self._closed

    def normalize_destination(self, destination: str) -> str:
        return normalize_chat_id(destination, self._chat_suffix)

    # ──────────────────────────────────────────────────────────────────────
    # Construção
    # ──────────────────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Constrói o cliente subjacente.

        Raises:
            ClientConnectionError: factory falhou ou sessão foi encerrada
                enquanto o cliente era construído.
        """
        started_at = time.perf_counter()
        try:
            client = await self._factory.create(self.session_id, self)
        except Exception as exc:
            raise ClientConnectionError(
                f"Falha ao criar cliente: {_error_message(exc)}"
            ) from exc

        record_latency(
            "connection_adapter",
            "connect",
            (time.perf_counter() - started_at) * 1000,
            session_id=self.session_id,
        )

        if self._closed or self._session.is_terminal:
            # logout ou desconexão chegaram durante o handshake
            await self._close_client(client)
            raise ClientConnectionError("Sessão encerrada durante a criação do cliente")

        self._client = client
        self._session.advance(SessionState.AWAITING_SCAN, "client_ready")

    # ──────────────────────────────────────────────────────────────────────
    # Callbacks do cliente
    # ──────────────────────────────────────────────────────────────────────

    async def on_qr(self, qr_code: str) -> None:
        """Novo QR; o receptor deve sempre usar o mais recente."""
        logger.info("client_qr_received", extra={"session_id": self.session_id})
        self._session.advance(SessionState.AWAITING_SCAN, "qr")
        self._emit("qr", {"qrCode": qr_code})

    async def on_state_change(self, state: str) -> None:
        """Mapeia estados do cliente para eventos e transições."""
        logger.info(
            "client_state_changed",
            extra={"session_id": self.session_id, "client_state": state},
        )
        if state == STATE_CONNECTED:
            self._session.advance(SessionState.CONNECTED, f"state:{state}")
            self._emit("connected", {})
            return

        if state in DISCONNECT_STATES:
            if not self._session.advance(SessionState.DISCONNECTED, f"state:{state}"):
                return
            self._emit("disconnected", {"reason": state})
            self._on_terminated(self._session)
            self._schedule_release()
            return

        logger.info(
            "client_state_ignored",
            extra={"session_id": self.session_id, "client_state": state},
        )

    async def on_message(self, message: dict[str, Any]) -> None:
        """Emite `message`; falha no anexo nunca suprime o evento."""
        media: bytes | None = None
        if has_attachment(message):
            media = await self._download_media(message)

        payload = extract_message_payload(message, media)
        logger.info(
            "client_message_received",
            extra={
                "session_id": self.session_id,
                "message_type": payload.message_type,
                "has_attachment": payload.has_attachment,
                "is_group": payload.is_group,
            },
        )
        self._emit("message", payload.to_dict())

    async def _download_media(self, message: dict[str, Any]) -> bytes | None:
        client = self._client
        try:
            if client is None:
                raise DeliveryError("Cliente ainda não disponível")
            started_at = time.perf_counter()
            media = await client.decrypt_media(message)
        except Exception as exc:
            logger.error(
                "media_download_failed",
                extra={
                    "session_id": self.session_id,
                    "error_type": type(exc).__name__,
                    "error": _error_message(exc),
                },
            )
            return None

        record_latency(
            "connection_adapter",
            "decrypt_media",
            (time.perf_counter() - started_at) * 1000,
            session_id=self.session_id,
        )
        return media

    def _emit(self, kind: str, data: dict[str, Any]) -> None:
        event = WebhookEvent(
            event=kind,  # type: ignore[arg-type]
            session_id=self.session_id,
            data=data,
            phone=self._session.phone,
        )
        self._dispatcher.emit(event, self._session.webhook_url)

    # ──────────────────────────────────────────────────────────────────────
    # Ações de saída
    # ──────────────────────────────────────────────────────────────────────

    def _require_client(self) -> WhatsAppClientProtocol:
        if self._client is None or self._closed:
            raise DeliveryError("Sessão não conectada")
        return self._client

    async def send_text(self, destination: str, body: str) -> str:
        """Envia texto e retorna o id da mensagem.

        Raises:
            DeliveryError: cliente ausente ou envio rejeitado.
        """
        client = self._require_client()
        chat_id = self.normalize_destination(destination)
        started_at = time.perf_counter()
        try:
            message_id = await client.send_text(chat_id, body)
        except Exception as exc:
            logger.warning(
                "send_text_failed",
                extra={"session_id": self.session_id, "error_type": type(exc).__name__},
            )
            raise DeliveryError(_error_message(exc)) from exc

        record_latency(
            "connection_adapter",
            "send_text",
            (time.perf_counter() - started_at) * 1000,
            session_id=self.session_id,
        )
        return message_id

    async def send_file(
        self,
        destination: str,
        file_base64: str,
        filename: str,
        caption: str = "",
    ) -> str:
        """Envia arquivo em base64 e retorna o id da mensagem.

        Raises:
            DeliveryError: cliente ausente ou envio rejeitado.
        """
        client = self._require_client()
        chat_id = self.normalize_destination(destination)
        started_at = time.perf_counter()
        try:
            message_id = await client.send_file(chat_id, file_base64, filename, caption)
        except Exception as exc:
            logger.warning(
                "send_file_failed",
                extra={"session_id": self.session_id, "error_type": type(exc).__name__},
            )
            raise DeliveryError(_error_message(exc)) from exc

        record_latency(
            "connection_adapter",
            "send_file",
            (time.perf_counter() - started_at) * 1000,
            session_id=self.session_id,
        )
        return message_id

    async def logout(self) -> None:
        """Desfaz o pareamento no celular.

        No-op se o cliente nunca foi criado ou já foi liberado/desconectado.

        Raises:
            DeliveryError: cliente rejeitou o logout.
        """
        client = self._client
        if client is None or self._closed or self._session.is_terminal:
            return
        try:
            await client.logout()
        except Exception as exc:
            raise DeliveryError(_error_message(exc)) from exc

    async def close(self) -> None:
        """Libera o cliente (browser). Idempotente.

        Raises:
            DeliveryError: cliente falhou ao fechar; o adapter continua
                com o cliente para nova tentativa.
        """
        self._closed = True
        client = self._client
        if client is None:
            return
        try:
            await client.close()
        except Exception as exc:
            raise DeliveryError(_error_message(exc)) from exc
        self._client = None

    async def _close_client(self, client: WhatsAppClientProtocol) -> None:
        try:
            await client.close()
        except Exception as exc:
            logger.warning(
                "client_close_failed",
                extra={"session_id": self.session_id, "error_type": type(exc).__name__},
            )

    def _schedule_release(self) -> None:
        """Fecha o cliente fora do callback atual (que roda dentro do cliente)."""
        client = self._client
        self._closed = True
        self._client = None
        if client is None:
            return
        self._close_task = asyncio.create_task(self._close_client(client))
