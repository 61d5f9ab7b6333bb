"""
Exports públicos do módulo fsm/states.

Estados canônicos do ciclo de vida de agendamentos.
"""

from fsm.states.appointment import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    AppointmentStatus,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "AppointmentStatus",
    "is_terminal",
    "is_valid_state",
]
