"""Modelo de sessão WhatsApp-Web mantida em memória pelo registry.

A Session é mutável apenas pelo adapter (callbacks de estado) e pelo
registry (logout). Nada é persistido: reiniciar o processo descarta tudo.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.observability import record_session_transition
from app.protocols.models import SessionSummary
from fsm import FSMStateMachine, SessionState, create_fsm

if TYPE_CHECKING:
    from app.coordinators.whatsapp.connection import ConnectionAdapter

logger = logging.getLogger(__name__)


@dataclass(eq=False, slots=True)
class Session:
    """Sessão lógica endereçada pelo caller.

    Atributos:
        session_id: Identificador informado ou derivado pelo caller
        phone: Contato associado (opcional)
        user_id: Dono da sessão no sistema cliente (opcional)
        webhook_url: Override do receptor; None usa o WEBHOOK_URL padrão
        created_at: Momento da criação (UTC)
        fsm: Máquina de estados do ciclo de vida
        adapter: Adapter dono do cliente subjacente
    """

    session_id: str
    phone: str | None = None
    user_id: str | None = None
    webhook_url: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    fsm: FSMStateMachine = field(init=False)
    adapter: ConnectionAdapter | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.fsm = create_fsm(self.session_id)

    @property
    def state(self) -> SessionState:
        return self.fsm.current_state

    @property
    def is_terminal(self) -> bool:
        return self.fsm.is_terminal

    def advance(
        self,
        target: SessionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Aplica transição; recusas são logadas em debug e retornam False."""
        result = self.fsm.transition(target, trigger, metadata)
        if not result.success:
            logger.debug(
                "session_transition_skipped",
                extra={
                    "session_id": self.session_id,
                    "target": target.value,
                    "trigger": trigger,
                    "reason": result.error_reason,
                },
            )
            return False

        transition = result.transition
        if transition is None:
            return False
        logger.info(
            "session_state_changed",
            extra={
                "session_id": self.session_id,
                "from_state": transition.from_state.value,
                "to_state": transition.to_state.value,
                "trigger": trigger,
            },
        )
        record_session_transition(
            self.session_id,
            transition.from_state.value,
            transition.to_state.value,
            trigger,
        )
        return True

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            status=self.state.value,
            phone=self.phone,
        )

    def to_status_dict(self) -> dict[str, Any]:
        """Resposta de GET /session/{id}/status para sessão existente."""
        data: dict[str, Any] = {
            "exists": True,
            "status": self.state.value,
            "sessionId": self.session_id,
            "createdAt": self.created_at.isoformat(),
        }
        if self.phone:
            data["phone"] = self.phone
        return data
