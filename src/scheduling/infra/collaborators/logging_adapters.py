"""Adaptadores de colaboradores para hosts sem integrações reais.

Registram a chamada em log (sem PII) e devolvem handles determinísticos.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scheduling.protocols import (
    CalendarSyncProtocol,
    MeetingLinkProviderProtocol,
    NotificationDispatcherProtocol,
)
from scheduling.services.formatting import format_duration

if TYPE_CHECKING:
    from datetime import datetime

    from scheduling.domain.appointment import Appointment, CustomerInfo

logger = logging.getLogger(__name__)

DEFAULT_MEETING_BASE_URL = "https://meet.example.com/room"


class LoggingCalendarSync(CalendarSyncProtocol):
    """Calendário simulado: cada agendamento vira o evento ``cal_{id}``."""

    def create_event(
        self,
        appointment: Appointment,
        customer: CustomerInfo | None,
        notes: str,
    ) -> str:
        event_id = f"cal_{appointment.id}"
        logger.info(
            "calendar_event_created",
            extra={
                "component": "calendar_sync",
                "action": "create_event",
                "result": "created",
                "appointment_id": appointment.id,
                "event_id": event_id,
                "has_customer": customer is not None,
                "has_notes": bool(notes),
            },
        )
        return event_id

    def update_event(self, event_id: str, *, start_date: datetime, end_date: datetime) -> None:
        logger.info(
            "calendar_event_updated",
            extra={
                "component": "calendar_sync",
                "action": "update_event",
                "result": "updated",
                "event_id": event_id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
        )

    def cancel_event(self, event_id: str, reason: str) -> None:
        logger.info(
            "calendar_event_cancelled",
            extra={
                "component": "calendar_sync",
                "action": "cancel_event",
                "result": "cancelled",
                "event_id": event_id,
                "has_reason": bool(reason),
            },
        )


class StaticMeetingLinkProvider(MeetingLinkProviderProtocol):
    """Links de sala derivados do id do agendamento."""

    def __init__(self, base_url: str = DEFAULT_MEETING_BASE_URL) -> None:
        self._base_url = base_url.rstrip("/")

    def generate_link(self, appointment_id: str) -> str:
        return f"{self._base_url}/{appointment_id}"


class LoggingNotificationDispatcher(NotificationDispatcherProtocol):
    """Lembretes apenas registrados em log."""

    def send_reminder(self, appointment: Appointment, lead_hours: int, *, channel: str) -> None:
        logger.info(
            "reminder_sent",
            extra={
                "component": "notification_dispatcher",
                "action": "send_reminder",
                "result": "sent",
                "appointment_id": appointment.id,
                "channel": channel,
                "lead_hours": lead_hours,
                "duration": format_duration(appointment.duration),
            },
        )

    def register_reminders(self, appointment: Appointment, customer: CustomerInfo | None) -> None:
        contact = customer.preferred_contact_method if customer is not None else None
        logger.info(
            "reminders_registered",
            extra={
                "component": "notification_dispatcher",
                "action": "register_reminders",
                "result": "registered",
                "appointment_id": appointment.id,
                "preferred_contact_method": contact,
            },
        )
