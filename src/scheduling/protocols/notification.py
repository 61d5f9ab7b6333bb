"""Contrato de envio de lembretes e pré-registro de notificações."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment, CustomerInfo


@runtime_checkable
class NotificationDispatcherProtocol(Protocol):
    """Contrato usado pelo ReminderScheduler e pelo agendamento."""

    def send_reminder(self, appointment: Appointment, lead_hours: int, *, channel: str) -> None:
        """Envia lembrete de ``lead_hours`` horas pelo canal informado."""
        ...

    def register_reminders(self, appointment: Appointment, customer: CustomerInfo | None) -> None:
        """Pré-registra lembretes no momento do agendamento."""
        ...
