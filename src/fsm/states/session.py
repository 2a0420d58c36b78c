"""
Estados do ciclo de vida de uma conexão WhatsApp-Web.

    initializing → awaiting_scan → connected → disconnected

Não existe estado de reconexão: `disconnected` é terminal e a sessão sai
do registry; reconectar exige criar uma sessão nova.
"""

from enum import StrEnum


class SessionState(StrEnum):
    """
    Estados de uma sessão WhatsApp-Web.

    Estados não-terminais:
        - INITIALIZING: Sessão alocada, cliente subjacente sendo construído
        - AWAITING_SCAN: Cliente criado/QR emitido, aguardando leitura no celular
        - CONNECTED: Pareamento reconhecido, sessão pronta para envio

    Estado terminal:
        - DISCONNECTED: Desconexão remota ou conflito; sessão removida
    """

    INITIALIZING = "initializing"
    AWAITING_SCAN = "awaiting_scan"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    def __str__(self) -> str:
        return self.value


TERMINAL_STATES: frozenset[SessionState] = frozenset({SessionState.DISCONNECTED})

DEFAULT_INITIAL_STATE: SessionState = SessionState.INITIALIZING


def is_terminal(state: SessionState) -> bool:
    """Verifica se o estado é terminal (sessão encerrada)."""
    return state in TERMINAL_STATES
