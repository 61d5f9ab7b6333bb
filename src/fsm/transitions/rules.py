"""
Regras de transição válidas entre status de agendamento.

Este módulo define o grafo de transições da máquina de estados.
"""

from fsm.states.appointment import TERMINAL_STATES, AppointmentStatus

TransitionMap = dict[AppointmentStatus, frozenset[AppointmentStatus]]

# Chave: status de origem
# Valor: conjunto de status de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.RESCHEDULED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.RESCHEDULED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    }),
    # RESCHEDULED é reentrante: pode ser remarcado de novo
    AppointmentStatus.RESCHEDULED: frozenset({
        AppointmentStatus.RESCHEDULED,
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    }),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.COMPLETED: frozenset(),
}


def get_valid_targets(state: AppointmentStatus) -> frozenset[AppointmentStatus]:
    """Retorna os status de destino válidos (vazio se terminal)."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: AppointmentStatus, to_state: AppointmentStatus) -> bool:
    """Verifica se uma transição é permitida segundo o grafo."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os status do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Nenhuma transição aponta para status inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in AppointmentStatus:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Status {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(f"Status terminal {state.name} não deveria ter transições: {targets}")

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, AppointmentStatus):
                errors.append(f"Transição {from_state.name} -> {target}: destino inválido")

    return errors
