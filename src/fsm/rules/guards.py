"""
Guards e invariantes para transições de status.

O grafo (VALID_TRANSITIONS) já cobre estados terminais e reentrada;
guards bloqueiam o que o grafo não expressa (ex: string crua que
coincide com o valor de um StrEnum).
Todos recebem (from_state, to_state) e retornam GuardResult.
"""

from collections.abc import Callable

from fsm.states.appointment import AppointmentStatus


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        return cls(allowed=False, reason=reason)


Guard = Callable[[AppointmentStatus, AppointmentStatus], GuardResult]


def guard_valid_state(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
) -> GuardResult:
    """Guard: verifica se ambos os status são válidos."""
    if not isinstance(from_state, AppointmentStatus):
        return GuardResult.deny(f"Status de origem inválido: {from_state}")

    if not isinstance(to_state, AppointmentStatus):
        return GuardResult.deny(f"Status de destino inválido: {to_state}")

    return GuardResult.allow()


# Aplicados em ordem; todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
]


def evaluate_guards(
    from_state: AppointmentStatus,
    to_state: AppointmentStatus,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
