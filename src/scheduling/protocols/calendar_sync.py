"""Contrato de sincronização com provedores de calendário.

Chamadas são best-effort: falhas são registradas pelo motor e nunca
desfazem o agendamento.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from scheduling.domain.appointment import Appointment, CustomerInfo


@runtime_checkable
class CalendarSyncProtocol(Protocol):
    """Contrato para criar, atualizar e cancelar eventos sincronizados."""

    def create_event(
        self,
        appointment: Appointment,
        customer: CustomerInfo | None,
        notes: str,
    ) -> str:
        """Cria evento e retorna o identificador no provedor."""
        ...

    def update_event(self, event_id: str, *, start_date: datetime, end_date: datetime) -> None:
        """Propaga nova data/hora para o evento existente."""
        ...

    def cancel_event(self, event_id: str, reason: str) -> None:
        """Cancela o evento no provedor."""
        ...
