"""
Módulo FSM: máquina de estados do gesto de reagendamento.

Estrutura:
    - states/: Estados do gesto (RescheduleState enum)
    - transitions/: Grafo de transições (VALID_TRANSITIONS)
    - rules/: Guards avaliados antes de cada transição
    - manager/: Máquina de estados (GestureStateMachine)
    - types/: Registros de transição (StateTransition, TransitionResult)
"""

from fsm.manager import (
    INITIAL_STATES,
    GestureStateMachine,
    TransitionError,
    create_gesture_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    RescheduleState,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "GestureStateMachine",
    "GuardResult",
    "RescheduleState",
    "StateTransition",
    "TransitionError",
    "TransitionResult",
    "create_gesture_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
