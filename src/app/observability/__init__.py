"""Observabilidade — contexto de logs e métricas.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_webhook_delivery
"""

from app.observability.correlation import (
    generate_correlation_id,
    get_correlation_id,
    get_session_context,
    reset_correlation_id,
    reset_session_context,
    set_correlation_id,
    set_session_context,
)
from app.observability.metrics import (
    record_latency,
    record_session_transition,
    record_webhook_delivery,
)

__all__ = [
    "generate_correlation_id",
    "get_correlation_id",
    "get_session_context",
    "record_latency",
    "record_session_transition",
    "record_webhook_delivery",
    "reset_correlation_id",
    "reset_session_context",
    "set_correlation_id",
    "set_session_context",
]
