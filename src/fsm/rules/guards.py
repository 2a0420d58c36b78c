"""
Guards avaliados antes de aplicar uma transição já presente no grafo.

Um guard recebe (origem, destino) e devolve GuardResult; o primeiro que
negar encerra a avaliação.
"""

from collections.abc import Callable

from fsm.states.session import TERMINAL_STATES, SessionState


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[SessionState, SessionState], GuardResult]


def guard_terminal_state(from_state: SessionState, to_state: SessionState) -> GuardResult:
    """Sessão desconectada não volta a nenhum estado."""
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(f"Estado {from_state.name} é terminal")
    return GuardResult.allow()


def guard_same_state(from_state: SessionState, to_state: SessionState) -> GuardResult:
    """Nega transição reflexiva (ex: segundo QR com a sessão já em AWAITING_SCAN)."""
    if from_state == to_state:
        return GuardResult.deny(f"Sessão já está em {from_state.name}")
    return GuardResult.allow()


DEFAULT_GUARDS: tuple[Guard, ...] = (
    guard_terminal_state,
    guard_same_state,
)


def evaluate_guards(
    from_state: SessionState,
    to_state: SessionState,
    guards: tuple[Guard, ...] | None = None,
) -> GuardResult:
    """
    Avalia guards em ordem.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    for guard in guards if guards is not None else DEFAULT_GUARDS:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result
    return GuardResult.allow()
