"""Contrato de persistência do snapshot de agendamentos.

O mapa em memória do AppointmentStore é sempre a fonte da verdade num
processo vivo; o backend apenas guarda/recupera snapshots.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment, RecurringSchedule


@runtime_checkable
class PersistenceBackendProtocol(Protocol):
    """Contrato para salvar e carregar o estado completo do motor."""

    def save(
        self,
        appointments: dict[str, Appointment],
        schedules: dict[str, RecurringSchedule],
    ) -> None:
        """Persiste o snapshot. Levanta PersistenceError em falha."""
        ...

    def load(self) -> tuple[dict[str, Appointment], dict[str, RecurringSchedule]]:
        """Retorna o último snapshot salvo, ou mapas vazios."""
        ...
