"""Modelos compartilhados entre registry, adapter e dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

EventKind = Literal["qr", "connected", "disconnected", "message"]

EVENT_KINDS: frozenset[str] = frozenset({"qr", "connected", "disconnected", "message"})

ATTACHMENT_FIELDS: tuple[str, ...] = ("media_base64", "media_mimetype", "media_filename")


@dataclass(frozen=True, slots=True)
class WebhookEvent:
    """Evento transitório enviado ao receptor do webhook.

    Attributes:
        event: Tipo do evento
        session_id: Sessão de origem
        data: Payload específico do tipo
        phone: Contato associado à sessão (opcional)
        timestamp: Momento da emissão (UTC)
    """

    event: EventKind
    session_id: str
    data: dict[str, Any] = field(default_factory=dict)
    phone: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if self.event not in EVENT_KINDS:
            raise ValueError(f"Tipo de evento inválido: {self.event}")
        if not self.session_id:
            raise ValueError("session_id é obrigatório")

    def to_payload(self) -> dict[str, Any]:
        """Corpo JSON do POST: {event, sessionId, phone?, data, timestamp}."""
        payload: dict[str, Any] = {
            "event": self.event,
            "sessionId": self.session_id,
            "data": dict(self.data),
            "timestamp": self.timestamp.isoformat(),
        }
        if self.phone:
            payload["phone"] = self.phone
        return payload


@dataclass(frozen=True, slots=True)
class MessagePayload:
    """Payload do evento `message`.

    Campos de anexo ficam None em mensagens de texto e são omitidos
    do dict enviado ao receptor.
    """

    message_id: str
    sender: str
    recipient: str
    body: str
    message_type: str | None
    is_group: bool
    sender_name: str | None
    timestamp: int | None
    media_base64: str | None = None
    media_mimetype: str | None = None
    media_filename: str | None = None

    @property
    def has_attachment(self) -> bool:
        return self.media_base64 is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "message_id": self.message_id,
            "from": self.sender,
            "to": self.recipient,
            "body": self.body,
            "type": self.message_type,
            "is_group": self.is_group,
            "sender_name": self.sender_name,
            "timestamp": self.timestamp,
        }
        if self.has_attachment:
            data["media_base64"] = self.media_base64
            data["media_mimetype"] = self.media_mimetype
            data["media_filename"] = self.media_filename
        return data


@dataclass(frozen=True, slots=True)
class SessionHints:
    """Dados opcionais informados na criação da sessão."""

    phone: str | None = None
    user_id: str | None = None
    webhook_url: str | None = None


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Snapshot de uma sessão para listagens."""

    session_id: str
    status: str
    phone: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"sessionId": self.session_id, "status": self.status}
        if self.phone:
            data["phone"] = self.phone
        return data
