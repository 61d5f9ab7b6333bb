"""Resultados discriminados das operações do motor.

Operações de agendamento nunca levantam exceção para desfechos de
negócio: o chamador ramifica em ``success``/``error_code``. Nenhum
caminho de falha altera o estado.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment, TimeSlot


class SchedulingErrorCode(StrEnum):
    NOT_FOUND = "not_found"
    SLOT_UNAVAILABLE = "slot_unavailable"
    POLICY_VIOLATION = "policy_violation"
    VALIDATION_ERROR = "validation_error"


@dataclass(frozen=True, slots=True)
class SchedulingResult:
    """Resultado de agendar/remarcar.

    Attributes:
        success: Se a operação foi efetivada
        appointment: Agendamento resultante (cópia) quando success=True
        error_code: Categoria da falha quando success=False
        error: Mensagem legível da falha
        alternatives: Slots sugeridos (sempre presentes em slot_unavailable)
        warnings: Falhas best-effort de colaboradores/persistência
        fee_applies: Remarcação sujeita a taxa (apenas informativo)
        fee_amount: Valor da taxa em centavos quando fee_applies=True
    """

    success: bool
    appointment: Appointment | None = None
    error_code: SchedulingErrorCode | None = None
    error: str | None = None
    alternatives: tuple[TimeSlot, ...] = ()
    warnings: tuple[str, ...] = ()
    fee_applies: bool = False
    fee_amount: int = 0

    def __post_init__(self) -> None:
        if self.success and self.appointment is None:
            raise ValueError("Resultado bem-sucedido deve incluir appointment")
        if not self.success and self.error_code is None:
            raise ValueError("Resultado de falha deve incluir error_code")

    @classmethod
    def ok(
        cls,
        appointment: Appointment,
        warnings: list[str] | None = None,
        *,
        fee_applies: bool = False,
        fee_amount: int = 0,
    ) -> SchedulingResult:
        return cls(
            success=True,
            appointment=appointment,
            warnings=tuple(warnings or ()),
            fee_applies=fee_applies,
            fee_amount=fee_amount,
        )

    @classmethod
    def fail(
        cls,
        error_code: SchedulingErrorCode,
        error: str,
        alternatives: list[TimeSlot] | None = None,
    ) -> SchedulingResult:
        return cls(
            success=False,
            error_code=error_code,
            error=error,
            alternatives=tuple(alternatives or ()),
        )


@dataclass(frozen=True, slots=True)
class CancellationResult:
    """Resultado de cancelamento.

    ``free_cancellation`` apenas informa elegibilidade; o motor não
    calcula nem executa reembolso.
    """

    success: bool
    appointment: Appointment | None = None
    error_code: SchedulingErrorCode | None = None
    error: str | None = None
    free_cancellation: bool | None = None
    refund_amount: int | None = None
    warnings: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.success and self.error_code is None:
            raise ValueError("Resultado de falha deve incluir error_code")

    @classmethod
    def fail(cls, error_code: SchedulingErrorCode, error: str) -> CancellationResult:
        return cls(success=False, error_code=error_code, error=error)


__all__ = ["CancellationResult", "SchedulingErrorCode", "SchedulingResult"]
