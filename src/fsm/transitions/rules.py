"""
Grafo de transições de um gesto de reagendamento.

Não há atalhos: um gesto aceito sempre passa por OPTIMISTICALLY_APPLIED
e PERSISTING antes de terminar, e a única saída de PERSISTING é
COMMITTED ou ROLLED_BACK.
"""

from fsm.states.gesture import TERMINAL_STATES, RescheduleState

TransitionMap = dict[RescheduleState, frozenset[RescheduleState]]

VALID_TRANSITIONS: TransitionMap = {
    RescheduleState.IDLE: frozenset({RescheduleState.DRAGGING}),
    RescheduleState.DRAGGING: frozenset({RescheduleState.DROP_PENDING}),
    # Sessão não autenticada e evento ausente também rejeitam aqui
    RescheduleState.DROP_PENDING: frozenset({
        RescheduleState.VALIDATED,
        RescheduleState.REJECTED,
    }),
    RescheduleState.VALIDATED: frozenset({RescheduleState.OPTIMISTICALLY_APPLIED}),
    RescheduleState.OPTIMISTICALLY_APPLIED: frozenset({RescheduleState.PERSISTING}),
    RescheduleState.PERSISTING: frozenset({
        RescheduleState.COMMITTED,
        RescheduleState.ROLLED_BACK,
    }),
    RescheduleState.REJECTED: frozenset(),
    RescheduleState.COMMITTED: frozenset(),
    RescheduleState.ROLLED_BACK: frozenset(),
}


def get_valid_targets(state: RescheduleState) -> frozenset[RescheduleState]:
    """Retorna os estados de destino permitidos (vazio se terminal)."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: RescheduleState, to_state: RescheduleState) -> bool:
    """Verifica se a aresta from_state → to_state existe no grafo."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Todo estado não-terminal alcança algum estado terminal

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in RescheduleState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for state in VALID_TRANSITIONS:
        if state in TERMINAL_STATES:
            continue
        if not _reaches_terminal(state):
            errors.append(f"Estado {state.name} não alcança estado terminal")

    return errors


def _reaches_terminal(start: RescheduleState) -> bool:
    seen: set[RescheduleState] = set()
    pending = [start]
    while pending:
        current = pending.pop()
        if current in TERMINAL_STATES:
            return True
        if current in seen:
            continue
        seen.add(current)
        pending.extend(get_valid_targets(current))
    return False
