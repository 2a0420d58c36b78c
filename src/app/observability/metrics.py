"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas depois
pelo coletor de logs (sem cliente de métricas no processo).

Métricas suportadas:
- Latência: tempo de operações de I/O (webhook, envio, decrypt)
- Webhook: resultado de cada entrega (sent|failed|skipped|shed)
- Transição: mudança de estado do ciclo de vida de uma sessão
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    session_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "webhook_dispatcher", "connection_adapter")
        operation: Nome da operação (ex: "post", "send_text")
        latency_ms: Latência em milissegundos
        session_id: Sessão associada, quando houver
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "session_id": session_id,
        },
    )


def record_webhook_delivery(
    event: str,
    outcome: str,
    session_id: str | None = None,
    status_code: int | None = None,
) -> None:
    """Registra o resultado de uma entrega de webhook.

    Args:
        event: Tipo do evento (qr, connected, disconnected, message)
        outcome: sent | failed | skipped | shed
        session_id: Sessão de origem do evento
        status_code: Status HTTP do receptor, quando houve resposta
    """
    logger.info(
        "metric_webhook_delivery",
        extra={
            "metric_type": "webhook_delivery",
            "event": event,
            "outcome": outcome,
            "status_code": status_code,
            "session_id": session_id,
        },
    )


def record_session_transition(
    session_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
) -> None:
    """Registra transição de estado de uma sessão."""
    logger.info(
        "metric_session_transition",
        extra={
            "metric_type": "session_transition",
            "from_state": from_state,
            "to_state": to_state,
            "trigger": trigger,
            "session_id": session_id,
        },
    )
