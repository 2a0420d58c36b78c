"""
Grafo de transições válidas do ciclo de vida da sessão.

CONNECTED direto de INITIALIZING cobre pareamento restaurado pela bridge
(token salvo no perfil do browser), quando nenhum QR é emitido.
"""

from fsm.states.session import TERMINAL_STATES, SessionState

TransitionMap = dict[SessionState, frozenset[SessionState]]

VALID_TRANSITIONS: TransitionMap = {
    SessionState.INITIALIZING: frozenset({
        SessionState.AWAITING_SCAN,
        SessionState.CONNECTED,
        SessionState.DISCONNECTED,
    }),
    SessionState.AWAITING_SCAN: frozenset({
        SessionState.CONNECTED,
        SessionState.DISCONNECTED,
    }),
    SessionState.CONNECTED: frozenset({
        SessionState.DISCONNECTED,
    }),
    SessionState.DISCONNECTED: frozenset(),
}


def get_valid_targets(state: SessionState) -> frozenset[SessionState]:
    """Retorna os destinos permitidos a partir de `state` (vazio se terminal)."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: SessionState, to_state: SessionState) -> bool:
    """Verifica se a aresta from_state → to_state existe no grafo."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in SessionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        if VALID_TRANSITIONS.get(state):
            errors.append(f"Estado terminal {state.name} não deveria ter transições")

    for from_state, targets in VALID_TRANSITIONS.items():
        if SessionState.DISCONNECTED not in targets and from_state not in TERMINAL_STATES:
            errors.append(f"Estado {from_state.name} não alcança DISCONNECTED")

    return errors
