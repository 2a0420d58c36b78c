"""Contexto de rastreamento: correlation_id (request HTTP) e session_id.

Os dois valores vivem em ContextVar e são injetados nos logs pelo
ContextFilter. Tasks criadas com asyncio.create_task herdam uma cópia do
contexto corrente, então callbacks de uma sessão mantêm o session_id.

Uso:
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_session_id: ContextVar[str] = ContextVar("session_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def get_session_context() -> str:
    """Retorna o session_id associado ao contexto atual."""
    return _session_id.get()


def set_session_context(session_id: str) -> Token[str]:
    """Associa o contexto atual a uma sessão WhatsApp."""
    return _session_id.set(session_id)


def reset_session_context(token: Token[str]) -> None:
    """Restaura o session_id anterior."""
    _session_id.reset(token)
