"""Endpoints de ciclo de vida de sessão.

Endpoints:
- POST /session/start: cria (ou reaproveita) sessão; QR chega via webhook
- GET /session/{session_id}/status: estado atual
- POST /session/{session_id}/logout: desfaz pareamento e remove
- GET /sessions: snapshot de todas as sessões
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from api.routes.dependencies import get_registry, require_api_key
from api.validators import (
    StartSessionRequest,
    resolve_start_session_id,
    validate_webhook_url,
)
from app.protocols.models import SessionHints
from app.sessions import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/session/start")
async def start_session(
    body: StartSessionRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Inicia sessão sem aguardar o handshake do cliente."""
    session_id = resolve_start_session_id(body)
    hints = SessionHints(
        phone=body.phone,
        user_id=body.user_id,
        webhook_url=validate_webhook_url(body.webhook_url),
    )
    session = registry.create_session(session_id, hints)
    return {
        "success": True,
        "message": "Sessão iniciando, aguarde o QR code",
        "sessionId": session.session_id,
    }


@router.get("/session/{session_id}/status")
async def session_status(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    session = registry.lookup(session_id)
    if session is None:
        return {"exists": False, "status": "not_found"}
    return session.to_status_dict()


@router.post("/session/{session_id}/logout")
async def logout_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Logout explícito; 404 se ausente, 500 se o cliente falhar."""
    await registry.terminate(session_id)
    return {"success": True, "message": "Sessão encerrada"}


@router.get("/sessions")
async def list_sessions(
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    return {"sessions": [summary.to_dict() for summary in registry.list()]}
