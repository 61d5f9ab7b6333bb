"""Chamadas best-effort aos colaboradores externos.

Executadas somente depois que o estado autoritativo foi gravado. Qualquer
falha e registrada em log e devolvida como warning; nunca desfaz a
operação principal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from config.logging import log_side_effect_failure
from fsm import AppointmentStatus
from scheduling.domain.appointment import LocationType

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment, CustomerInfo
    from scheduling.protocols import (
        CalendarSyncProtocol,
        MeetingLinkProviderProtocol,
        NotificationDispatcherProtocol,
    )

logger = logging.getLogger(__name__)


def _failure(collaborator: str, action: str, appointment_id: str) -> str:
    return log_side_effect_failure(logger, collaborator, action, appointment_id)


@dataclass(slots=True)
class SideEffectOutcome:
    """Handles obtidos dos colaboradores e warnings acumulados."""

    calendar_invite_id: str | None = None
    meeting_link: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def has_updates(self) -> bool:
        return self.calendar_invite_id is not None or self.meeting_link is not None


class CollaboratorRunner:
    """Despacha efeitos colaterais de agendamento para os colaboradores injetados."""

    def __init__(
        self,
        calendar_sync: CalendarSyncProtocol | None = None,
        meeting_links: MeetingLinkProviderProtocol | None = None,
        notifier: NotificationDispatcherProtocol | None = None,
    ) -> None:
        self._calendar_sync = calendar_sync
        self._meeting_links = meeting_links
        self._notifier = notifier

    def on_booked(
        self,
        appointment: Appointment,
        customer: CustomerInfo | None,
    ) -> SideEffectOutcome:
        outcome = SideEffectOutcome()

        if self._calendar_sync is not None:
            try:
                outcome.calendar_invite_id = self._calendar_sync.create_event(
                    appointment, customer, appointment.notes
                )
            except Exception:
                outcome.warnings.append(
                    _failure("calendar_sync", "create_event", appointment.id)
                )

        if appointment.location_type == LocationType.ONLINE and self._meeting_links is not None:
            try:
                outcome.meeting_link = self._meeting_links.generate_link(appointment.id)
            except Exception:
                outcome.warnings.append(
                    _failure("meeting_links", "generate_link", appointment.id)
                )

        if self._notifier is not None:
            try:
                self._notifier.register_reminders(appointment, customer)
            except Exception:
                outcome.warnings.append(
                    _failure("notifier", "register_reminders", appointment.id)
                )

        return outcome

    def on_rescheduled(self, appointment: Appointment) -> list[str]:
        if self._calendar_sync is None or appointment.calendar_invite_id is None:
            return []
        try:
            self._calendar_sync.update_event(
                appointment.calendar_invite_id,
                start_date=appointment.scheduled_date,
                end_date=appointment.end_time,
            )
        except Exception:
            return [_failure("calendar_sync", "update_event", appointment.id)]
        return []

    def on_cancelled(self, appointment: Appointment, reason: str) -> list[str]:
        if self._calendar_sync is None or appointment.calendar_invite_id is None:
            return []
        try:
            self._calendar_sync.cancel_event(appointment.calendar_invite_id, reason)
        except Exception:
            return [_failure("calendar_sync", "cancel_event", appointment.id)]
        return []

    def on_booking_superseded(self, booked: Appointment, current: Appointment) -> list[str]:
        """Alinha o evento criado no agendamento com o estado atual do agendamento.

        Um cancelamento ou remarcação que rodou entre a gravação e o
        ``create_event`` não tinha ``calendar_invite_id`` para propagar.
        """
        if current.status == AppointmentStatus.CANCELLED:
            logger.info(
                "calendar_event_superseded",
                extra={"appointment_id": current.id, "result": "cancelled"},
            )
            return self.on_cancelled(current, current.cancellation_reason or "")
        if (
            current.scheduled_date != booked.scheduled_date
            or current.duration != booked.duration
        ):
            logger.info(
                "calendar_event_superseded",
                extra={"appointment_id": current.id, "result": "rescheduled"},
            )
            return self.on_rescheduled(current)
        return []
