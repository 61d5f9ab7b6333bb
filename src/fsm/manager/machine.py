"""
Máquina de estados (AppointmentStateMachine) do ciclo de vida de agendamentos.

Valida transições contra o grafo e os guards. O motor cria uma instância
por operação a partir do status gravado; o StatusTransition devolvido
vai para o log da operação.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.appointment import DEFAULT_INITIAL_STATE, AppointmentStatus
from fsm.transitions.rules import is_transition_valid
from fsm.types.transition import StatusTransition, TransitionResult


class AppointmentStateMachine:
    """
    Máquina de estados de um agendamento.

    Attributes:
        current_state: Status atual
        appointment_id: Agendamento dono da máquina
    """

    __slots__ = ("_appointment_id", "_current_state")

    def __init__(
        self,
        initial_state: AppointmentStatus | None = None,
        appointment_id: str = "",
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._appointment_id = appointment_id

    @property
    def current_state(self) -> AppointmentStatus:
        return self._current_state

    @property
    def appointment_id(self) -> str:
        return self._appointment_id

    def transition(
        self,
        target: AppointmentStatus,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de status.

        Args:
            target: Status de destino
            trigger: Operação que originou a transição (ex: 'cancel_appointment')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} -> {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        transition = StatusTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target

        return TransitionResult(success=True, transition=transition)


def create_fsm(
    appointment_id: str,
    initial_state: AppointmentStatus | None = None,
) -> AppointmentStateMachine:
    """Factory function para criar a FSM de um agendamento."""
    return AppointmentStateMachine(
        initial_state=initial_state,
        appointment_id=appointment_id,
    )
