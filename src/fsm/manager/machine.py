"""
Máquina de estados do ciclo de vida de uma sessão WhatsApp-Web.

Cada Session possui uma instância. Transições fora do grafo ou negadas por
guard não levantam exceção: o chamador recebe TransitionResult(success=False)
e decide se loga ou ignora (callbacks repetidos da bridge são comuns).
"""

from typing import Any

from fsm.rules.guards import evaluate_guards
from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    SessionState,
    is_terminal,
)
from fsm.transitions.rules import is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class FSMStateMachine:
    """
    Máquina de estados de uma sessão.

    Attributes:
        current_state: Estado atual
        history: Transições aplicadas, em ordem
    """

    __slots__ = ("_current_state", "_history", "_session_id")

    def __init__(
        self,
        initial_state: SessionState | None = None,
        session_id: str = "",
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._session_id = session_id

    @property
    def current_state(self) -> SessionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia)."""
        return list(self._history)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def transition(
        self,
        target: SessionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta aplicar uma transição.

        Args:
            target: Estado de destino
            trigger: Gatilho (ex: 'qr', 'state:CONNECTED', 'logout')
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha e o registro da transição
        """
        guard_result = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)


def create_fsm(
    session_id: str,
    initial_state: SessionState | None = None,
) -> FSMStateMachine:
    """Factory de FSMStateMachine para uma sessão."""
    return FSMStateMachine(initial_state=initial_state, session_id=session_id)
