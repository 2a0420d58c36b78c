"""Cliente WhatsApp-Web via bridge WebSocket.

O protocolo WhatsApp-Web (browser, handshake, criptografia) roda num
processo externo. Este módulo mantém uma conexão WebSocket por sessão e
troca frames JSON com a bridge:

- comandos: {"type": "start"|"send_text"|"send_file"|"decrypt"|"logout", "id": ...}
- eventos:  {"type": "qr"|"state"|"message", ...}
- respostas: {"type": "result", "id": ..., "ok": bool, "data"|"error": ...}

Respostas são resolvidas direto no loop de leitura; eventos vão para uma
fila consumida por outra task, que aguarda cada callback na ordem de
chegada (um callback pode emitir comandos sem travar a leitura).
"""

from __future__ import annotations

import asyncio
import base64
import contextlib
import json
import logging
import uuid
from typing import TYPE_CHECKING, Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from config.settings import WhatsAppSettings, get_whatsapp_settings
from utils.errors import ClientConnectionError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.whatsapp_client import ClientEventHandler

logger = logging.getLogger(__name__)

EVENT_FRAME_TYPES = frozenset({"qr", "state", "message"})


class BridgeError(Exception):
    """Comando rejeitado pela bridge ou conexão perdida."""


class BridgeClient:
    """Implementa WhatsAppClientProtocol sobre uma conexão WebSocket."""

    def __init__(
        self,
        session_id: str,
        websocket: Any,
        handler: ClientEventHandler,
        *,
        command_timeout_seconds: float = 60.0,
    ) -> None:
        self._session_id = session_id
        self._ws = websocket
        self._handler = handler
        self._command_timeout = command_timeout_seconds
        self._pending: dict[str, asyncio.Future[Any]] = {}
        self._events: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._reader_task: asyncio.Task[None] | None = None
        self._events_task: asyncio.Task[None] | None = None
        self._closing = False
        self._connection_lost = False

    @property
    def session_id(self) -> str:
        return self._session_id

    def start(self) -> None:
        """Inicia as tasks de leitura e de entrega de eventos."""
        self._reader_task = asyncio.create_task(self._read_loop())
        self._events_task = asyncio.create_task(self._event_loop())

    # ──────────────────────────────────────────────────────────────────────
    # Comandos
    # ──────────────────────────────────────────────────────────────────────

    async def request(
        self,
        command: str,
        payload: dict[str, Any] | None = None,
        *,
        timeout_seconds: float | None = None,
    ) -> Any:
        """Envia comando e aguarda o frame `result` correspondente.

        Raises:
            BridgeError: bridge respondeu ok=false ou conexão caiu.
            TimeoutError: sem resposta dentro do timeout.
        """
        if self._closing:
            raise BridgeError("bridge_client_closed")
        if self._connection_lost:
            raise BridgeError("bridge_connection_closed")

        request_id = uuid.uuid4().hex
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        frame = {"type": command, "id": request_id, **(payload or {})}
        try:
            await self._ws.send(json.dumps(frame))
            return await asyncio.wait_for(
                future,
                timeout=timeout_seconds or self._command_timeout,
            )
        except (ConnectionClosed, WebSocketException) as exc:
            raise BridgeError(f"bridge_connection_error: {type(exc).__name__}") from exc
        finally:
            self._pending.pop(request_id, None)

    async def send_text(self, chat_id: str, body: str) -> str:
        data = await self.request("send_text", {"to": chat_id, "body": body})
        return _message_id(data)

    async def send_file(
        self,
        chat_id: str,
        file_base64: str,
        filename: str,
        caption: str,
    ) -> str:
        data = await self.request(
            "send_file",
            {
                "to": chat_id,
                "file_base64": file_base64,
                "filename": filename,
                "caption": caption,
            },
        )
        return _message_id(data)

    async def decrypt_media(self, message: dict[str, Any]) -> bytes:
        data = await self.request("decrypt", {"message": message})
        encoded = data.get("base64") if isinstance(data, dict) else data
        if not isinstance(encoded, str) or not encoded:
            raise BridgeError("bridge_decrypt_empty")
        # A bridge pode devolver data URI (data:<mime>;base64,<conteudo>)
        if encoded.startswith("data:") and "," in encoded:
            encoded = encoded.split(",", 1)[1]
        return base64.b64decode(encoded)

    async def logout(self) -> None:
        await self.request("logout")

    async def close(self) -> None:
        """Fecha a conexão e encerra as tasks. Idempotente."""
        if self._closing:
            return
        self._closing = True
        self._fail_pending("bridge_client_closed")

        with contextlib.suppress(ConnectionClosed, WebSocketException, OSError):
            await self._ws.close()

        current = asyncio.current_task()
        tasks = [
            task
            for task in (self._reader_task, self._events_task)
            if task is not None and task is not current and not task.done()
        ]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ──────────────────────────────────────────────────────────────────────
    # Leitura
    # ──────────────────────────────────────────────────────────────────────

    async def _read_loop(self) -> None:
        try:
            async for raw in self._ws:
                self._handle_frame(raw)
        except ConnectionClosed:
            pass
        finally:
            self._connection_lost = True
            self._fail_pending("bridge_connection_closed")
            if not self._closing:
                logger.warning(
                    "bridge_connection_lost",
                    extra={"session_id": self._session_id},
                )
                # Sem bridge não há sessão: tratado como desconexão do cliente
                self._events.put_nowait({"type": "state", "state": "DISCONNECTED"})

    def _handle_frame(self, raw: str | bytes) -> None:
        try:
            frame = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("bridge_frame_invalid", extra={"session_id": self._session_id})
            return
        if not isinstance(frame, dict):
            logger.warning("bridge_frame_invalid", extra={"session_id": self._session_id})
            return

        frame_type = frame.get("type")
        if frame_type == "result":
            self._resolve(frame)
        elif frame_type in EVENT_FRAME_TYPES:
            self._events.put_nowait(frame)
        else:
            logger.debug(
                "bridge_frame_ignored",
                extra={"session_id": self._session_id, "frame_type": frame_type},
            )

    def _resolve(self, frame: dict[str, Any]) -> None:
        future = self._pending.get(str(frame.get("id")))
        if future is None or future.done():
            return
        if frame.get("ok"):
            future.set_result(frame.get("data"))
        else:
            future.set_exception(BridgeError(str(frame.get("error") or "bridge_command_failed")))

    def _fail_pending(self, reason: str) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(BridgeError(reason))

    async def _event_loop(self) -> None:
        while True:
            frame = await self._events.get()
            try:
                await self._dispatch_event(frame)
            except Exception as exc:
                logger.error(
                    "bridge_event_handler_failed",
                    extra={
                        "session_id": self._session_id,
                        "frame_type": frame.get("type"),
                        "error_type": type(exc).__name__,
                    },
                )

    async def _dispatch_event(self, frame: dict[str, Any]) -> None:
        frame_type = frame["type"]
        if frame_type == "qr":
            await self._handler.on_qr(str(frame.get("qr") or ""))
        elif frame_type == "state":
            await self._handler.on_state_change(str(frame.get("state") or ""))
        elif frame_type == "message":
            message = frame.get("message")
            if isinstance(message, dict):
                await self._handler.on_message(message)


def _message_id(data: Any) -> str:
    if isinstance(data, dict):
        value = data.get("id") or data.get("message_id")
        if isinstance(value, dict):
            value = value.get("_serialized")
        return str(value or "")
    return str(data or "")


class BridgeClientFactory:
    """Implementa WhatsAppClientFactoryProtocol: uma conexão por sessão."""

    def __init__(
        self,
        settings: WhatsAppSettings | None = None,
        *,
        connect: Callable[..., Any] | None = None,
    ) -> None:
        """Inicializa factory.

        Args:
            settings: WhatsAppSettings. Se None, carrega do ambiente.
            connect: Função de conexão WebSocket alternativa (testes).
        """
        self._settings = settings or get_whatsapp_settings()
        self._connect = connect or websockets.connect

    async def create(self, session_id: str, handler: ClientEventHandler) -> BridgeClient:
        """Abre a conexão e aguarda o ack do comando `start`.

        Raises:
            ClientConnectionError: bridge inacessível, timeout ou start recusado.
        """
        timeout = self._settings.connect_timeout_seconds
        try:
            websocket = await asyncio.wait_for(
                self._connect(self._settings.bridge_url, max_size=None),
                timeout=timeout,
            )
        except (OSError, TimeoutError, WebSocketException) as exc:
            logger.error(
                "bridge_connect_failed",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )
            raise ClientConnectionError("Bridge WhatsApp indisponível") from exc

        client = BridgeClient(
            session_id,
            websocket,
            handler,
            command_timeout_seconds=self._settings.command_timeout_seconds,
        )
        client.start()
        try:
            await client.request(
                "start",
                {"sessionId": session_id, "headless": self._settings.headless},
                timeout_seconds=timeout,
            )
        except (BridgeError, TimeoutError) as exc:
            await client.close()
            logger.error(
                "bridge_start_failed",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )
            raise ClientConnectionError(f"Falha ao iniciar sessão na bridge: {exc}") from exc

        logger.info("bridge_session_started", extra={"session_id": session_id})
        return client
