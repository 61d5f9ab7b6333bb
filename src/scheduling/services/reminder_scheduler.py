"""ReminderScheduler - disparo periódico de lembretes por antecedência.

Um lembrete de ``L`` horas dispara quando ``L - 0.5 < horas_ate <= L``
(limite superior inclusivo) e a chave ``"{L}h"`` ainda não está em
``reminders_sent``. A chave só é gravada depois que ao menos um canal
entregou, então ticks repetidos na mesma janela não duplicam envios.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from fsm import AppointmentStatus
from scheduling.infra.stores.snapshot_codec import persist_snapshot
from scheduling.observability import (
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from scheduling.services.clock import Clock, hours_between, utc_now
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment
    from scheduling.domain.policy import SchedulingPolicy
    from scheduling.infra.stores.appointment_store import AppointmentStore
    from scheduling.protocols import NotificationDispatcherProtocol, PersistenceBackendProtocol

logger = logging.getLogger(__name__)

REMINDER_WINDOW_HOURS = 0.5

REMINDABLE_STATUSES = frozenset(
    {
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.RESCHEDULED,
    }
)


def reminder_key(lead_hours: int) -> str:
    return f"{lead_hours}h"


def in_reminder_window(hours_until: float, lead_hours: int) -> bool:
    return lead_hours - REMINDER_WINDOW_HOURS < hours_until <= lead_hours


@dataclass(frozen=True, slots=True)
class ReminderEvent:
    """Lembrete efetivamente entregue ao dispatcher."""

    appointment_id: str
    channel: str
    lead_hours: int
    sent_at: datetime

    @property
    def key(self) -> str:
        return reminder_key(self.lead_hours)


class ReminderScheduler:
    """Varre o store e emite lembretes nas antecedências configuradas."""

    def __init__(
        self,
        store: AppointmentStore,
        policy: SchedulingPolicy,
        dispatcher: NotificationDispatcherProtocol,
        persistence: PersistenceBackendProtocol | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._persistence = persistence
        self._clock = clock
        self._channels = policy.reminder_lead_times.by_channel()
        self._lead_times = sorted(
            {lead for leads in self._channels.values() for lead in leads}, reverse=True
        )

    def tick(self, now: datetime | None = None) -> list[ReminderEvent]:
        """Executa uma varredura; seguro para chamar repetidamente.

        Sem correlation_id no contexto, cada tick recebe um próprio.
        """
        token = None if get_correlation_id() else set_correlation_id()
        try:
            return self._tick(now or self._clock())
        finally:
            if token is not None:
                reset_correlation_id(token)

    def _tick(self, current_time: datetime) -> list[ReminderEvent]:
        events: list[ReminderEvent] = []

        with self._store.lock:
            for appointment in self._store.all():
                if appointment.status not in REMINDABLE_STATUSES:
                    continue
                fired = self._fire_due(appointment, current_time)
                if not fired:
                    continue
                events.extend(fired)
                sent = appointment.reminders_sent | {event.key for event in fired}
                self._store.put(appointment.model_copy(update={"reminders_sent": sent}))

            if events:
                self._persist()

        if events:
            logger.info(
                "reminders_dispatched",
                extra={
                    "component": "reminder_scheduler",
                    "action": "tick",
                    "result": "sent",
                    "reminder_count": len(events),
                },
            )
        return events

    def _fire_due(self, appointment: Appointment, now: datetime) -> list[ReminderEvent]:
        hours_until = hours_between(now, appointment.scheduled_date)
        fired: list[ReminderEvent] = []
        for lead in self._lead_times:
            if reminder_key(lead) in appointment.reminders_sent:
                continue
            if not in_reminder_window(hours_until, lead):
                continue
            for channel, leads in self._channels.items():
                if lead not in leads:
                    continue
                if self._dispatch(appointment, lead, channel):
                    fired.append(
                        ReminderEvent(
                            appointment_id=appointment.id,
                            channel=channel,
                            lead_hours=lead,
                            sent_at=now,
                        )
                    )
        return fired

    def _dispatch(self, appointment: Appointment, lead: int, channel: str) -> bool:
        try:
            self._dispatcher.send_reminder(appointment, lead, channel=channel)
        except Exception:
            logger.exception(
                "reminder_dispatch_failed",
                extra={
                    "component": "reminder_scheduler",
                    "action": "send_reminder",
                    "result": "error",
                    "appointment_id": appointment.id,
                    "channel": channel,
                    "lead_hours": lead,
                },
            )
            return False
        return True

    def _persist(self) -> None:
        if self._persistence is None:
            return
        try:
            persist_snapshot(self._store, self._persistence)
        except PersistenceError:
            logger.exception(
                "snapshot_save_failed",
                extra={"component": "reminder_scheduler", "action": "tick", "result": "error"},
            )
