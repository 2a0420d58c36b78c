"""Testes do cliente WebSocket da bridge WhatsApp-Web com socket falso."""

from __future__ import annotations

import asyncio
import base64
import json
from typing import Any

import pytest

from app.infra.whatsapp.bridge_client import BridgeClient, BridgeClientFactory, BridgeError
from config.settings import WhatsAppSettings
from utils.errors import ClientConnectionError

_CLOSE = object()


class FakeWebSocket:
    """Socket em memória: `sent` guarda frames enviados, `push` injeta recebidos."""

    def __init__(self, auto_reply: bool = True) -> None:
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self.auto_reply = auto_reply
        self.replies: dict[str, dict[str, Any]] = {}
        self._incoming: asyncio.Queue[Any] = asyncio.Queue()

    async def send(self, raw: str) -> None:
        frame = json.loads(raw)
        self.sent.append(frame)
        if self.auto_reply:
            reply = self.replies.get(frame["type"], {"ok": True, "data": {"id": f"msg-{len(self.sent)}"}})
            self.push({"type": "result", "id": frame["id"], **reply})

    def push(self, frame: Any) -> None:
        self._incoming.put_nowait(json.dumps(frame) if isinstance(frame, dict) else frame)

    def drop(self) -> None:
        self._incoming.put_nowait(_CLOSE)

    async def close(self) -> None:
        self.closed = True
        self._incoming.put_nowait(_CLOSE)

    def __aiter__(self) -> FakeWebSocket:
        return self

    async def __anext__(self) -> Any:
        item = await self._incoming.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        return item


class RecordingHandler:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    async def on_qr(self, qr_code: str) -> None:
        self.calls.append(("qr", qr_code))

    async def on_state_change(self, state: str) -> None:
        self.calls.append(("state", state))

    async def on_message(self, message: dict[str, Any]) -> None:
        self.calls.append(("message", message))


async def _settle() -> None:
    for _ in range(20):
        await asyncio.sleep(0)


def _factory(websocket: FakeWebSocket) -> BridgeClientFactory:
    async def _connect(url: str, **kwargs: Any) -> FakeWebSocket:
        return websocket

    settings = WhatsAppSettings(connect_timeout_seconds=1.0, command_timeout_seconds=1.0)
    return BridgeClientFactory(settings, connect=_connect)


@pytest.mark.asyncio
async def test_create_sends_start_and_returns_client() -> None:
    websocket = FakeWebSocket()

    client = await _factory(websocket).create("s1", RecordingHandler())

    assert isinstance(client, BridgeClient)
    assert websocket.sent[0]["type"] == "start"
    assert websocket.sent[0]["sessionId"] == "s1"
    await client.close()
    assert websocket.closed is True


@pytest.mark.asyncio
async def test_create_fails_when_start_is_rejected() -> None:
    websocket = FakeWebSocket()
    websocket.replies["start"] = {"ok": False, "error": "browser launch failed"}

    with pytest.raises(ClientConnectionError, match="browser launch failed"):
        await _factory(websocket).create("s1", RecordingHandler())

    assert websocket.closed is True


@pytest.mark.asyncio
async def test_create_fails_when_bridge_is_unreachable() -> None:
    async def _refuse(url: str, **kwargs: Any) -> FakeWebSocket:
        raise OSError("connection refused")

    factory = BridgeClientFactory(WhatsAppSettings(), connect=_refuse)

    with pytest.raises(ClientConnectionError, match="Bridge WhatsApp indisponível"):
        await factory.create("s1", RecordingHandler())


@pytest.mark.asyncio
async def test_events_are_delivered_in_order() -> None:
    websocket = FakeWebSocket()
    handler = RecordingHandler()
    client = await _factory(websocket).create("s1", handler)

    websocket.push({"type": "qr", "qr": "data:image/png;base64,AAA"})
    websocket.push({"type": "state", "state": "CONNECTED"})
    websocket.push({"type": "message", "message": {"id": "m1", "body": "oi"}})
    websocket.push("not json")
    await _settle()

    assert handler.calls == [
        ("qr", "data:image/png;base64,AAA"),
        ("state", "CONNECTED"),
        ("message", {"id": "m1", "body": "oi"}),
    ]
    await client.close()


@pytest.mark.asyncio
async def test_send_text_returns_message_id() -> None:
    websocket = FakeWebSocket()
    client = await _factory(websocket).create("s1", RecordingHandler())
    websocket.replies["send_text"] = {"ok": True, "data": {"id": {"_serialized": "true_x@c.us_1"}}}

    message_id = await client.send_text("5511@c.us", "oi")

    assert message_id == "true_x@c.us_1"
    assert websocket.sent[-1]["to"] == "5511@c.us"
    assert websocket.sent[-1]["body"] == "oi"
    await client.close()


@pytest.mark.asyncio
async def test_decrypt_media_accepts_data_uri() -> None:
    websocket = FakeWebSocket()
    client = await _factory(websocket).create("s1", RecordingHandler())
    encoded = base64.b64encode(b"bytes").decode()
    websocket.replies["decrypt"] = {"ok": True, "data": f"data:image/png;base64,{encoded}"}

    assert await client.decrypt_media({"id": "m1"}) == b"bytes"
    await client.close()


@pytest.mark.asyncio
async def test_rejected_command_raises_bridge_error() -> None:
    websocket = FakeWebSocket()
    client = await _factory(websocket).create("s1", RecordingHandler())
    websocket.replies["logout"] = {"ok": False, "error": "not logged in"}

    with pytest.raises(BridgeError, match="not logged in"):
        await client.logout()
    await client.close()


@pytest.mark.asyncio
async def test_callback_can_issue_commands_without_deadlock() -> None:
    websocket = FakeWebSocket()
    decrypted: list[bytes] = []

    class _DecryptingHandler(RecordingHandler):
        async def on_message(self, message: dict[str, Any]) -> None:
            decrypted.append(await client.decrypt_media(message))

    websocket.replies["decrypt"] = {"ok": True, "data": {"base64": base64.b64encode(b"x").decode()}}
    client = await _factory(websocket).create("s1", _DecryptingHandler())

    websocket.push({"type": "message", "message": {"id": "m1", "isMedia": True}})
    await _settle()

    assert decrypted == [b"x"]
    await client.close()


@pytest.mark.asyncio
async def test_lost_connection_reports_disconnected() -> None:
    websocket = FakeWebSocket()
    handler = RecordingHandler()
    client = await _factory(websocket).create("s1", handler)

    websocket.drop()
    await _settle()

    assert handler.calls == [("state", "DISCONNECTED")]
    with pytest.raises(BridgeError):
        await client.send_text("5511@c.us", "oi")
    await client.close()


@pytest.mark.asyncio
async def test_close_is_idempotent_and_silences_disconnect() -> None:
    websocket = FakeWebSocket()
    handler = RecordingHandler()
    client = await _factory(websocket).create("s1", handler)

    await client.close()
    await client.close()
    await _settle()

    assert handler.calls == []
    with pytest.raises(BridgeError, match="bridge_client_closed"):
        await client.logout()
