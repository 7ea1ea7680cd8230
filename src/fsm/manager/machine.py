"""
Máquina de estados (GestureStateMachine) de um gesto de reagendamento.

Uma instância por gesto: o estado e o histórico pertencem somente ao
gesto que os criou, então gestos sobre eventos diferentes nunca competem
pelo mesmo objeto.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.gesture import (
    DEFAULT_INITIAL_STATE,
    RescheduleState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult


class TransitionError(RuntimeError):
    """Transição negada quando o chamador exige sucesso."""


class GestureStateMachine:
    """
    Máquina de estados de um gesto de arraste.

    Attributes:
        current_state: Estado atual do gesto
        history: Transições realizadas, em ordem
    """

    __slots__ = ("_current_state", "_gesture_id", "_history")

    def __init__(
        self,
        initial_state: RescheduleState | None = None,
        gesture_id: str = "",
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._gesture_id = gesture_id

    @property
    def current_state(self) -> RescheduleState:
        """Estado atual do gesto."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def gesture_id(self) -> str:
        """Identificador do gesto."""
        return self._gesture_id

    @property
    def is_terminal(self) -> bool:
        """Verifica se o gesto já terminou."""
        return is_terminal(self._current_state)

    @property
    def visited_states(self) -> list[RescheduleState]:
        """Sequência completa de estados, incluindo o inicial."""
        if not self._history:
            return [self._current_state]
        return [self._history[0].from_state, *(t.to_state for t in self._history)]

    def can_transition_to(self, target: RescheduleState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[RescheduleState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: RescheduleState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'drop', 'write_ok')
            metadata: Dados técnicos para auditoria

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult.refused(
                f"Transição inválida: {self._current_state.name} → {target.name}"
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult.refused(guard_result.reason or "Transição bloqueada")

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
            gesture_id=self._gesture_id,
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult.applied(transition)

    def advance(
        self,
        target: RescheduleState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> StateTransition:
        """
        Como transition(), mas levanta TransitionError se negada.

        Usado pelo coordenador, para o qual uma transição negada indica
        bug de orquestração e não uma condição de negócio.
        """
        result = self.transition(target, trigger, metadata)
        if not result.success or result.transition is None:
            raise TransitionError(result.error_reason or "transição negada")
        return result.transition

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo do estado atual, seguro para logs."""
        return {
            "gesture_id": self._gesture_id,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_gesture_fsm(
    gesture_id: str,
    initial_state: RescheduleState | None = None,
) -> GestureStateMachine:
    """Factory para criar a máquina de um gesto."""
    return GestureStateMachine(initial_state=initial_state, gesture_id=gesture_id)


INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATE})
