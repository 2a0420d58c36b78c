"""Dependências FastAPI compartilhadas pelas rotas.

- require_api_key: bearer token estático (API_SECRET)
- get_registry: SessionRegistry criado no lifespan (app.state)
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

from fastapi import Request

from config.settings import AuthSettings, get_auth_settings
from utils.errors import UnauthorizedError

if TYPE_CHECKING:
    from app.sessions import SessionRegistry

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Não autorizado"
BEARER_PREFIX = "Bearer "


def _auth_settings(request: Request) -> AuthSettings:
    settings = getattr(request.app.state, "auth_settings", None)
    return settings if settings is not None else get_auth_settings()


def extract_bearer_token(authorization: str | None) -> str:
    """Token de `Authorization: Bearer <token>`; vazio se ausente/malformado."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return ""
    return authorization[len(BEARER_PREFIX) :].strip()


async def require_api_key(request: Request) -> None:
    """Valida o bearer token.

    Sem API_SECRET configurado toda rota protegida responde 401.

    Raises:
        UnauthorizedError: token ausente, malformado ou divergente.
    """
    settings = _auth_settings(request)
    token = extract_bearer_token(request.headers.get("authorization"))

    if not settings.is_configured or not token:
        logger.warning(
            "auth_rejected",
            extra={
                "path": request.url.path,
                "reason": "secret_not_configured" if not settings.is_configured else "missing_token",
            },
        )
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

    if not hmac.compare_digest(token.encode(), settings.api_secret.encode()):
        logger.warning("auth_rejected", extra={"path": request.url.path, "reason": "invalid_token"})
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)


def get_registry(request: Request) -> SessionRegistry:
    """SessionRegistry da aplicação (criado no lifespan)."""
    return request.app.state.registry
