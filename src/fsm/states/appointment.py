"""
Estados canônicos do ciclo de vida de um agendamento.

Estados são determinísticos e explícitos. Cancelamento e conclusão são
transições de status: o agendamento nunca é removido, preservando o
histórico para auditoria.
"""

from enum import StrEnum


class AppointmentStatus(StrEnum):
    """
    Status de um agendamento.

    Estados não-terminais:
        - SCHEDULED: Criado por agendamento bem-sucedido (inicial)
        - CONFIRMED: Confirmado externamente pelo cliente/prestador
        - RESCHEDULED: Remarcado, continua ativo (reentrante)

    Estados terminais:
        - CANCELLED: Cancelado, nenhuma remarcação posterior
        - COMPLETED: Realizado (dirigido por sistema externo)
    """

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    RESCHEDULED = "rescheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, o agendamento não pode transitar para outro estado
TERMINAL_STATES: frozenset[AppointmentStatus] = frozenset({
    AppointmentStatus.CANCELLED,
    AppointmentStatus.COMPLETED,
})

DEFAULT_INITIAL_STATE: AppointmentStatus = AppointmentStatus.SCHEDULED


def is_terminal(state: AppointmentStatus) -> bool:
    """Verifica se o status é terminal."""
    return state in TERMINAL_STATES


def is_valid_state(state: AppointmentStatus) -> bool:
    """Verifica se o valor é um AppointmentStatus válido do enum."""
    return isinstance(state, AppointmentStatus)
