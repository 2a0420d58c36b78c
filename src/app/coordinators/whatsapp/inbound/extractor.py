"""Extração do payload de mensagens recebidas do cliente WhatsApp-Web.

O cliente entrega a mensagem como dict no formato do WhatsApp-Web
(id, from, to, body, type, isGroupMsg, sender{pushname,name}, timestamp,
isMedia, isMMS, mimetype, filename). Campos ausentes viram None/False.
"""

from __future__ import annotations

import base64
from typing import Any

from app.protocols.models import MessagePayload


def has_attachment(message: dict[str, Any]) -> bool:
    """Mensagem carrega anexo a ser decifrado (mídia ou MMS)."""
    return bool(message.get("isMedia") or message.get("isMMS"))


def extract_sender_name(message: dict[str, Any]) -> str | None:
    """Push name do remetente, com fallback para o nome do contato."""
    sender = message.get("sender")
    if not isinstance(sender, dict):
        return None
    return sender.get("pushname") or sender.get("name") or None


def _extract_message_id(message: dict[str, Any]) -> str:
    raw_id = message.get("id")
    # Algumas versões serializam o id como {"_serialized": "..."}
    if isinstance(raw_id, dict):
        raw_id = raw_id.get("_serialized") or raw_id.get("id")
    return str(raw_id) if raw_id is not None else ""


def _extract_timestamp(message: dict[str, Any]) -> int | None:
    value = message.get("timestamp") or message.get("t")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def extract_message_payload(
    message: dict[str, Any],
    media: bytes | None = None,
) -> MessagePayload:
    """Monta o MessagePayload a partir da mensagem bruta.

    Args:
        message: Mensagem como entregue pelo cliente
        media: Bytes do anexo já decifrado; None omite os campos de anexo

    Returns:
        MessagePayload pronto para o evento `message`.
    """
    attachment: dict[str, str | None] = {}
    if media is not None:
        attachment = {
            "media_base64": base64.b64encode(media).decode("ascii"),
            "media_mimetype": message.get("mimetype"),
            "media_filename": message.get("filename"),
        }

    return MessagePayload(
        message_id=_extract_message_id(message),
        sender=str(message.get("from") or ""),
        recipient=str(message.get("to") or ""),
        body=str(message.get("body") or ""),
        message_type=_optional_str(message.get("type")),
        is_group=bool(message.get("isGroupMsg")),
        sender_name=extract_sender_name(message),
        timestamp=_extract_timestamp(message),
        **attachment,
    )
