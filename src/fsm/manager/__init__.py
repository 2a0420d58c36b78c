"""
Exports públicos do módulo fsm/manager.

Máquina de estados (FSMStateMachine) do ciclo de vida da sessão.
"""

from fsm.manager.machine import (
    FSMStateMachine,
    create_fsm,
)

__all__ = [
    "FSMStateMachine",
    "create_fsm",
]
