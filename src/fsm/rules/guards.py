"""
Guards avaliados antes de cada transição do gesto.

Guards recebem (from_state, to_state) e podem negar uma aresta que o grafo
permite. A lista padrão cobre tipos inválidos, saída de estado terminal
e transição reflexiva.
"""

from collections.abc import Callable

from fsm.states.gesture import TERMINAL_STATES, RescheduleState


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


Guard = Callable[[RescheduleState, RescheduleState], GuardResult]


def guard_valid_state(
    from_state: RescheduleState,
    to_state: RescheduleState,
) -> GuardResult:
    """Guard: ambos os estados precisam ser RescheduleState."""
    if not isinstance(from_state, RescheduleState):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")
    if not isinstance(to_state, RescheduleState):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")
    return GuardResult.allow()


def guard_terminal_state(
    from_state: RescheduleState,
    to_state: RescheduleState,
) -> GuardResult:
    """Guard: gesto encerrado não volta a se mover."""
    del to_state
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(
            f"Gesto já encerrado em {from_state.name}, não permite transição"
        )
    return GuardResult.allow()


def guard_same_state(
    from_state: RescheduleState,
    to_state: RescheduleState,
) -> GuardResult:
    """Guard: nenhuma fase do gesto se repete."""
    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


# Todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
]


def evaluate_guards(
    from_state: RescheduleState,
    to_state: RescheduleState,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia os guards em ordem.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
