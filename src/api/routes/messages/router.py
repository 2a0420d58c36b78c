"""Endpoints de envio de mensagens por uma sessão existente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends

from api.routes.dependencies import get_registry, require_api_key
from api.validators import (
    SESSION_ID_REQUIRED,
    SendFileRequest,
    SendMessageRequest,
    require_field,
)
from app.sessions import Session, SessionRegistry
from utils.errors import DeliveryError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from app.coordinators.whatsapp.connection import ConnectionAdapter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/message", dependencies=[Depends(require_api_key)])

SESSION_NOT_FOUND = "Sessão não encontrada"


def _resolve_session(
    registry: SessionRegistry,
    session_id: str | None,
    phone: str | None = None,
) -> Session:
    """Sessão por id ou, na falta dele, pelo telefone.

    Raises:
        ValidationError: nem sessionId nem phone.
        NotFoundError: sessão inexistente.
    """
    session_id = (session_id or "").strip()
    if session_id:
        session = registry.lookup(session_id)
    elif phone and phone.strip():
        session = registry.lookup_by_contact(phone)
    else:
        raise ValidationError(SESSION_ID_REQUIRED)

    if session is None:
        raise NotFoundError(SESSION_NOT_FOUND)
    return session


def _adapter(session: Session) -> ConnectionAdapter:
    if session.adapter is None:
        raise DeliveryError("Sessão não conectada")
    return session.adapter


@router.post("/send")
async def send_message(
    body: SendMessageRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Envia texto; `to` sem '@' recebe o sufixo de chat individual."""
    session = _resolve_session(registry, body.session_id, body.phone)
    destination = require_field(body.to, "to")
    text = require_field(body.message, "message")

    adapter = _adapter(session)
    message_id = await adapter.send_text(destination, text)
    logger.info(
        "message_sent",
        extra={"session_id": session.session_id, "kind": "text"},
    )
    return {
        "success": True,
        "message_id": message_id,
        "to": adapter.normalize_destination(destination),
    }


@router.post("/send-file")
async def send_file(
    body: SendFileRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Envia arquivo em base64 com legenda opcional."""
    session = _resolve_session(registry, body.session_id)
    destination = require_field(body.to, "to")
    file_base64 = require_field(body.file_base64, "file_base64")
    filename = require_field(body.filename, "filename")

    message_id = await _adapter(session).send_file(
        destination,
        file_base64,
        filename,
        body.caption or "",
    )
    logger.info(
        "message_sent",
        extra={"session_id": session.session_id, "kind": "file"},
    )
    return {"success": True, "message_id": message_id}
