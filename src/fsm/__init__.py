"""
Módulo FSM — ciclo de vida das sessões WhatsApp-Web.

    initializing → awaiting_scan → connected → disconnected (terminal)

Estrutura:
    - states/: SessionState e estados terminais
    - transitions/: grafo VALID_TRANSITIONS
    - rules/: guards avaliados antes de cada transição
    - manager/: FSMStateMachine (estado atual + histórico)
    - types/: StateTransition, TransitionResult
"""

from fsm.manager import (
    FSMStateMachine,
    create_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    SessionState,
    is_terminal,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "FSMStateMachine",
    "GuardResult",
    "SessionState",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "validate_transition_map",
]
