"""
Registros das transições de um gesto de reagendamento.

O histórico de um gesto mostra, em logs e testes, que todo drop
terminou em COMMITTED, ROLLED_BACK ou REJECTED.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.gesture import RescheduleState, is_terminal


@dataclass(frozen=True, slots=True)
class StateTransition:
    """Passo do gesto `gesture_id`; metadata nunca carrega PII de paciente."""

    from_state: RescheduleState
    to_state: RescheduleState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    gesture_id: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    @property
    def ends_gesture(self) -> bool:
        return is_terminal(self.to_state)

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "gesture_id": self.gesture_id,
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "ends_gesture": self.ends_gesture,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """Transição aplicada ou o motivo da recusa; nunca os dois."""

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        if self.success != (self.transition is not None):
            raise ValueError("transition acompanha somente resultados aplicados")
        if not self.success and not self.error_reason:
            raise ValueError("resultado recusado exige error_reason")

    @classmethod
    def applied(cls, transition: StateTransition) -> "TransitionResult":
        return cls(success=True, transition=transition)

    @classmethod
    def refused(cls, reason: str) -> "TransitionResult":
        return cls(success=False, error_reason=reason)
