"""
Exports públicos do módulo fsm/types.

Registros imutáveis de transição e resultado de tentativa.
"""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = [
    "StateTransition",
    "TransitionResult",
]
