"""Limite de tamanho do corpo das requisições.

Content-Length declarado acima do limite é recusado antes de ler o corpo.
Sem Content-Length (transfer-encoding chunked) o corpo é lido até o limite
e repassado à aplicação; passou do limite, responde 413 sem chamar a rota.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.datastructures import Headers
from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

PAYLOAD_TOO_LARGE_MESSAGE = "Payload muito grande"


class BodySizeLimitMiddleware:
    """Responde 413 `{"error": ...}` para corpos acima de `max_body_bytes`."""

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length", "")
        if content_length.isdigit():
            if int(content_length) > self.max_body_bytes:
                await self._reject(scope, receive, send, int(content_length))
                return
            await self.app(scope, receive, send)
            return

        buffered: list[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > self.max_body_bytes:
                await self._reject(scope, receive, send, received)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        logger.warning(
            "request_body_too_large",
            extra={
                "path": scope.get("path", ""),
                "content_length": size,
                "max_body_bytes": self.max_body_bytes,
            },
        )
        response = JSONResponse(status_code=413, content={"error": PAYLOAD_TOO_LARGE_MESSAGE})
        await response(scope, receive, send)
