"""Estados canônicos de um gesto de reagendamento por drag-and-drop.

Cada gesto percorre um caminho estritamente sequencial:

    IDLE → DRAGGING → DROP_PENDING → (VALIDATED | REJECTED)
         → OPTIMISTICALLY_APPLIED → PERSISTING → (COMMITTED | ROLLED_BACK)

Estados terminais encerram o gesto; nenhum gesto fica parado em
PERSISTING depois que a escrita remota resolve.
"""

from enum import StrEnum


class RescheduleState(StrEnum):
    """Estados de um gesto de reagendamento.

    Estados não-terminais:
        - IDLE: Nenhum arraste ativo
        - DRAGGING: Ponteiro em movimento, sem efeitos colaterais
        - DROP_PENDING: Ponteiro solto, horário candidato em cálculo
        - VALIDATED: Candidato dentro do expediente da grade
        - OPTIMISTICALLY_APPLIED: Estado local já atualizado
        - PERSISTING: Escrita remota em andamento

    Estados terminais:
        - REJECTED: Candidato fora da grade (ou gesto inválido); no-op
        - COMMITTED: Escrita remota confirmada
        - ROLLED_BACK: Escrita falhou; snapshot pré-arraste restaurado
    """

    IDLE = "IDLE"
    DRAGGING = "DRAGGING"
    DROP_PENDING = "DROP_PENDING"
    VALIDATED = "VALIDATED"
    OPTIMISTICALLY_APPLIED = "OPTIMISTICALLY_APPLIED"
    PERSISTING = "PERSISTING"

    REJECTED = "REJECTED"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"

    def __str__(self) -> str:
        return self.value


TERMINAL_STATES: frozenset[RescheduleState] = frozenset({
    RescheduleState.REJECTED,
    RescheduleState.COMMITTED,
    RescheduleState.ROLLED_BACK,
})

DEFAULT_INITIAL_STATE: RescheduleState = RescheduleState.IDLE


def is_terminal(state: RescheduleState) -> bool:
    """Verifica se o estado encerra o gesto."""
    return state in TERMINAL_STATES


def is_valid_state(state: RescheduleState) -> bool:
    """Verifica se o valor é um RescheduleState válido."""
    return isinstance(state, RescheduleState)
