"""Filters de logging para injeção de contexto.

Campos injetados em todo record:
- correlation_id: ID de rastreamento do request HTTP (vazio em callbacks)
- session_id: sessão WhatsApp em cujo contexto o log foi emitido
- service: nome do serviço
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class ContextFilter(logging.Filter):
    """Injeta correlation_id, session_id e service em cada record de log.

    Valores passados explicitamente via `extra` têm precedência sobre os
    getters de contexto. Nunca adicionar corpo de mensagem ou mídia.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
        session_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")
        self._get_session_id = session_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Enriquece o record; nunca descarta."""
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        session_id = getattr(record, "session_id", None)
        record.session_id = session_id if session_id else self._get_session_id()
        record.service = self._service_name
        return True
