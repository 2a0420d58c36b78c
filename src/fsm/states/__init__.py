"""
Exports públicos do módulo fsm/states.

Estados do ciclo de vida de uma conexão WhatsApp-Web.
"""

from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    SessionState,
    is_terminal,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "SessionState",
    "is_terminal",
]
