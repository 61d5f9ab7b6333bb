"""
Módulo FSM - Máquina de estados do ciclo de vida de agendamentos.

Estrutura:
    - states/: Definições dos status (AppointmentStatus enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (AppointmentStateMachine)
    - types/: Tipos de dados (StatusTransition, TransitionResult)
"""

from fsm.manager import AppointmentStateMachine, create_fsm
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    AppointmentStatus,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import StatusTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "AppointmentStateMachine",
    "AppointmentStatus",
    "GuardResult",
    "StatusTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
