"""SchedulingEngine - orquestrador de agendamento, remarcação e cancelamento.

Cada operação pública executa leitura-checagem-escrita dentro de
``store.lock``; colaboradores externos são chamados depois da gravação,
fora da seção crítica. Desfechos de negócio voltam como Result, nunca
como exceção.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, get_args

from pydantic import ValidationError

from fsm import AppointmentStatus, create_fsm
from scheduling.domain.appointment import (
    Appointment,
    Initiator,
    LocationType,
    RecurrencePattern,
    RecurringSchedule,
    RescheduleEntry,
    TimeSlot,
)
from scheduling.domain.policy import DEFAULT_SCHEDULING_POLICY, TimeOfDay
from scheduling.domain.results import (
    CancellationResult,
    SchedulingErrorCode,
    SchedulingResult,
)
from scheduling.infra.stores.appointment_store import AppointmentStore
from scheduling.infra.stores.snapshot_codec import persist_snapshot
from scheduling.services.business_calendar import BusinessCalendar
from scheduling.services.clock import Clock, hours_between, utc_now
from scheduling.services.conflict_detector import ConflictDetector, ConflictReason
from scheduling.services.recurrence import expand_occurrences
from scheduling.services.side_effects import CollaboratorRunner
from scheduling.services.slot_generator import SlotGenerator
from utils.errors import PersistenceError, SchedulingValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fsm import TransitionResult
    from scheduling.domain.appointment import CustomerInfo
    from scheduling.domain.availability import AvailabilityQuery
    from scheduling.domain.policy import DayOfWeek, SchedulingPolicy
    from scheduling.protocols import (
        CalendarSyncProtocol,
        MeetingLinkProviderProtocol,
        NotificationDispatcherProtocol,
        PersistenceBackendProtocol,
    )

logger = logging.getLogger(__name__)

BOOKING_ALTERNATIVES = 5
RESCHEDULE_ALTERNATIVES = 3
ALTERNATIVE_WINDOW_DAYS = 7
DEFAULT_RESCHEDULE_REASON = "Rescheduled by request"
DEFAULT_SERVICE_DURATION = 60

_REJECTION_MESSAGES: dict[ConflictReason, str] = {
    ConflictReason.IN_PAST: "Horário solicitado já passou",
    ConflictReason.BEYOND_HORIZON: "Horário além do limite de antecedência de agendamento",
    ConflictReason.OVERLAP: "Horário solicitado não está disponível",
    ConflictReason.CAPACITY: "Limite de agendamentos simultâneos atingido",
}


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _transition_log(result: TransitionResult) -> dict[str, object]:
    return result.transition.to_log_dict() if result.transition is not None else {}


class SchedulingEngine:
    """Compõe calendário, gerador de slots e detector de conflitos.

    Args:
        policy: Política de agendamento (validada na construção)
        store: AppointmentStore compartilhado (ex: com o ReminderScheduler)
        persistence: Backend de snapshot; ``save`` após cada mutação
        calendar_sync: Colaborador de calendário (best-effort)
        meeting_links: Gerador de links (apenas ``online``)
        notifier: Pré-registro de lembretes no agendamento
        clock: Relógio injetável
        load_on_start: Carrega o snapshot do backend na construção
    """

    def __init__(
        self,
        policy: SchedulingPolicy = DEFAULT_SCHEDULING_POLICY,
        *,
        store: AppointmentStore | None = None,
        persistence: PersistenceBackendProtocol | None = None,
        calendar_sync: CalendarSyncProtocol | None = None,
        meeting_links: MeetingLinkProviderProtocol | None = None,
        notifier: NotificationDispatcherProtocol | None = None,
        clock: Clock = utc_now,
        load_on_start: bool = True,
    ) -> None:
        self._policy = policy
        self._store = store if store is not None else AppointmentStore()
        self._persistence = persistence
        self._clock = clock
        self._calendar = BusinessCalendar(policy)
        self._slots = SlotGenerator(policy, self._calendar)
        self._conflicts = ConflictDetector(policy, self._store, clock)
        self._collaborators = CollaboratorRunner(calendar_sync, meeting_links, notifier)

        if persistence is not None and load_on_start:
            self.load()

    @property
    def policy(self) -> SchedulingPolicy:
        return self._policy

    @property
    def store(self) -> AppointmentStore:
        return self._store

    @property
    def persistence(self) -> PersistenceBackendProtocol | None:
        return self._persistence

    @property
    def calendar(self) -> BusinessCalendar:
        return self._calendar

    @property
    def slot_generator(self) -> SlotGenerator:
        return self._slots

    @property
    def conflict_detector(self) -> ConflictDetector:
        return self._conflicts

    # Persistência

    def load(self) -> None:
        """Substitui o estado em memória pelo snapshot salvo.

        Raises:
            PersistenceError: backend indisponível ou snapshot inválido
        """
        if self._persistence is None:
            return
        appointments, schedules = self._persistence.load()
        self._store.restore(appointments, schedules)
        logger.info(
            "engine_state_loaded",
            extra={
                "component": "scheduling_engine",
                "action": "load",
                "result": "ok",
                "appointment_count": len(appointments),
                "schedule_count": len(schedules),
            },
        )

    def _persist(self, action: str) -> list[str]:
        if self._persistence is None:
            return []
        try:
            persist_snapshot(self._store, self._persistence)
        except PersistenceError:
            logger.exception(
                "snapshot_save_failed",
                extra={"component": "scheduling_engine", "action": action, "result": "error"},
            )
            return ["persistence.save failed"]
        return []

    # Agendamento

    def book_appointment(
        self,
        customer: CustomerInfo | None,
        service_type: str,
        requested_date: datetime,
        duration: int,
        location_type: LocationType = LocationType.STUDIO,
        location: str = "",
        notes: str = "",
    ) -> SchedulingResult:
        """Agenda um novo atendimento ou devolve até 5 alternativas."""
        if duration <= 0:
            return SchedulingResult.fail(
                SchedulingErrorCode.VALIDATION_ERROR, "duration deve ser maior que zero"
            )
        if not service_type or not service_type.strip():
            return SchedulingResult.fail(
                SchedulingErrorCode.VALIDATION_ERROR, "service_type obrigatório"
            )
        try:
            location_type = LocationType(location_type)
        except ValueError:
            return SchedulingResult.fail(
                SchedulingErrorCode.VALIDATION_ERROR, f"location_type inválido: {location_type}"
            )

        start = self._calendar.localize(requested_date)
        slot = TimeSlot.starting_at(start, duration, frozenset({service_type}))

        with self._store.lock:
            rejection = self._reject_candidate(
                slot, service_type, BOOKING_ALTERNATIVES, exclude_appointment_id=None
            )
            if rejection is not None:
                return rejection

            try:
                appointment = Appointment(
                    id=_new_id("apt"),
                    service_type=service_type,
                    scheduled_date=start,
                    duration=duration,
                    location_type=location_type,
                    location=location,
                    status=AppointmentStatus.SCHEDULED,
                    customer=customer,
                    notes=notes,
                    created_at=self._clock(),
                )
            except ValidationError as exc:
                return SchedulingResult.fail(
                    SchedulingErrorCode.VALIDATION_ERROR,
                    f"Dados de agendamento inválidos: {exc.error_count()} erro(s)",
                )
            self._store.put(appointment)
            warnings = self._persist("book_appointment")

        outcome = self._collaborators.on_booked(appointment, customer)
        warnings.extend(outcome.warnings)
        if outcome.has_updates:
            with self._store.lock:
                current = self._store.get(appointment.id)
                if current is not None:
                    updates: dict[str, str] = {}
                    if outcome.calendar_invite_id is not None:
                        updates["calendar_invite_id"] = outcome.calendar_invite_id
                    if outcome.meeting_link is not None:
                        updates["meeting_link"] = outcome.meeting_link
                    current = current.model_copy(update=updates)
                    self._store.put(current)
                    warnings.extend(self._persist("book_appointment"))

            # cancelamento/remarcação entre a gravação e o create_event não viu o evento
            if current is not None and outcome.calendar_invite_id is not None:
                warnings.extend(self._collaborators.on_booking_superseded(appointment, current))

        logger.info(
            "appointment_booked",
            extra={
                "component": "scheduling_engine",
                "action": "book_appointment",
                "result": "booked",
                "appointment_id": appointment.id,
                "service_type": service_type,
                "warning_count": len(warnings),
            },
        )
        return SchedulingResult.ok(self._require(appointment.id), warnings)

    def reschedule_appointment(
        self,
        appointment_id: str,
        new_date: datetime,
        new_duration: int | None = None,
        reason: str | None = None,
        initiated_by: Initiator = "customer",
    ) -> SchedulingResult:
        """Move um agendamento ativo ou devolve até 3 alternativas."""
        if new_duration is not None and new_duration <= 0:
            return SchedulingResult.fail(
                SchedulingErrorCode.VALIDATION_ERROR, "new_duration deve ser maior que zero"
            )
        if initiated_by not in get_args(Initiator):
            return SchedulingResult.fail(
                SchedulingErrorCode.VALIDATION_ERROR, f"initiated_by inválido: {initiated_by}"
            )

        with self._store.lock:
            current = self._store.get(appointment_id)
            if current is None:
                return SchedulingResult.fail(
                    SchedulingErrorCode.NOT_FOUND, f"Agendamento {appointment_id} não encontrado"
                )

            machine = create_fsm(current.id, current.status)
            transition = machine.transition(
                AppointmentStatus.RESCHEDULED,
                trigger="reschedule_appointment",
                metadata={"initiated_by": initiated_by},
            )
            if not transition.success:
                return SchedulingResult.fail(
                    SchedulingErrorCode.POLICY_VIOLATION,
                    transition.error_reason or "Transição de status recusada",
                )

            policy_error = self._check_reschedule_policy(current, initiated_by)
            if policy_error is not None:
                return SchedulingResult.fail(SchedulingErrorCode.POLICY_VIOLATION, policy_error)

            duration = new_duration if new_duration is not None else current.duration
            start = self._calendar.localize(new_date)
            slot = TimeSlot.starting_at(start, duration, frozenset({current.service_type}))
            rejection = self._reject_candidate(
                slot,
                current.service_type,
                RESCHEDULE_ALTERNATIVES,
                exclude_appointment_id=current.id,
            )
            if rejection is not None:
                return rejection

            now = self._clock()
            hours_until = hours_between(now, current.scheduled_date)
            fee_applies = (
                initiated_by == "customer"
                and hours_until < self._policy.reschedule_fee_waiver_hours
            )
            entry = RescheduleEntry(
                original_date=current.scheduled_date,
                new_date=start,
                reason=reason or DEFAULT_RESCHEDULE_REASON,
                initiated_by=initiated_by,
                timestamp=now,
            )
            updated = current.model_copy(
                update={
                    "scheduled_date": start,
                    "duration": duration,
                    "status": machine.current_state,
                    "reschedule_history": [*current.reschedule_history, entry],
                    # lembretes valem para o horário novo
                    "reminders_sent": set(),
                }
            )
            self._store.put(updated)
            warnings = self._persist("reschedule_appointment")

        warnings.extend(self._collaborators.on_rescheduled(updated))
        logger.info(
            "appointment_rescheduled",
            extra={
                "component": "scheduling_engine",
                "action": "reschedule_appointment",
                "result": "rescheduled",
                "appointment_id": appointment_id,
                "transition": _transition_log(transition),
                "initiated_by": initiated_by,
                "fee_applies": fee_applies,
                "reschedule_count": len(updated.reschedule_history),
            },
        )
        return SchedulingResult.ok(
            self._require(appointment_id),
            warnings,
            fee_applies=fee_applies,
            fee_amount=self._policy.reschedule.fee_amount if fee_applies else 0,
        )

    def cancel_appointment(
        self,
        appointment_id: str,
        reason: str = "",
        refund_amount: int | None = None,
    ) -> CancellationResult:
        """Cancela (estado terminal) e informa elegibilidade de cancelamento gratuito."""
        with self._store.lock:
            current = self._store.get(appointment_id)
            if current is None:
                return CancellationResult.fail(
                    SchedulingErrorCode.NOT_FOUND, f"Agendamento {appointment_id} não encontrado"
                )

            machine = create_fsm(current.id, current.status)
            transition = machine.transition(
                AppointmentStatus.CANCELLED, trigger="cancel_appointment"
            )
            if not transition.success:
                return CancellationResult.fail(
                    SchedulingErrorCode.POLICY_VIOLATION,
                    transition.error_reason or "Transição de status recusada",
                )

            hours_until = hours_between(self._clock(), current.scheduled_date)
            free_cancellation = hours_until >= self._policy.cancellation_policy_hours
            updated = current.model_copy(
                update={"status": machine.current_state, "cancellation_reason": reason or None}
            )
            self._store.put(updated)
            warnings = self._persist("cancel_appointment")

        warnings.extend(self._collaborators.on_cancelled(updated, reason))
        logger.info(
            "appointment_cancelled",
            extra={
                "component": "scheduling_engine",
                "action": "cancel_appointment",
                "result": "cancelled",
                "appointment_id": appointment_id,
                "transition": _transition_log(transition),
                "free_cancellation": free_cancellation,
            },
        )
        return CancellationResult(
            success=True,
            appointment=self._require(appointment_id),
            free_cancellation=free_cancellation,
            refund_amount=refund_amount,
            warnings=tuple(warnings),
        )

    def confirm_appointment(self, appointment_id: str) -> SchedulingResult:
        """Confirmação externa (ex: cliente respondeu ao convite)."""
        return self._apply_status(
            appointment_id, AppointmentStatus.CONFIRMED, "confirm_appointment"
        )

    def complete_appointment(self, appointment_id: str) -> SchedulingResult:
        """Marca o atendimento como realizado (terminal)."""
        return self._apply_status(
            appointment_id, AppointmentStatus.COMPLETED, "complete_appointment"
        )

    def _apply_status(
        self,
        appointment_id: str,
        target: AppointmentStatus,
        trigger: str,
    ) -> SchedulingResult:
        with self._store.lock:
            current = self._store.get(appointment_id)
            if current is None:
                return SchedulingResult.fail(
                    SchedulingErrorCode.NOT_FOUND, f"Agendamento {appointment_id} não encontrado"
                )
            machine = create_fsm(current.id, current.status)
            transition = machine.transition(target, trigger=trigger)
            if not transition.success:
                return SchedulingResult.fail(
                    SchedulingErrorCode.POLICY_VIOLATION,
                    transition.error_reason or "Transição de status recusada",
                )
            updated = current.model_copy(update={"status": machine.current_state})
            self._store.put(updated)
            warnings = self._persist(trigger)

        logger.info(
            "appointment_status_changed",
            extra={
                "component": "scheduling_engine",
                "action": trigger,
                "result": target.value,
                "appointment_id": appointment_id,
                "transition": _transition_log(transition),
            },
        )
        return SchedulingResult.ok(updated, warnings)

    # Séries recorrentes

    def create_recurring_schedule(
        self,
        pattern: RecurrencePattern | str,
        frequency: int,
        start_time: datetime,
        duration: int,
        end_date: datetime | None = None,
        end_after_occurrences: int | None = None,
        days_of_week: Iterable[DayOfWeek] | None = None,
        exceptions: Iterable[date] = (),
        *,
        service_type: str = "teaching",
        customer: CustomerInfo | None = None,
        location_type: LocationType = LocationType.STUDIO,
        location: str = "Studio",
    ) -> RecurringSchedule:
        """Gera a série e grava cada ocorrência como agendamento independente.

        Ocorrências não passam pelo ConflictDetector: a série é tratada como
        pré-negociada. Quem precisa de checagem deve usar ``book_appointment``
        para cada data.

        Raises:
            SchedulingValidationError: padrão, frequência, duração ou limites inválidos
        """
        try:
            recurrence = RecurrencePattern(pattern)
        except ValueError as exc:
            raise SchedulingValidationError(
                f"padrão de recorrência inválido: {pattern}"
            ) from exc
        if duration <= 0:
            raise SchedulingValidationError("duration deve ser maior que zero")

        start = self._calendar.localize(start_time)
        end = self._calendar.localize(end_date) if end_date is not None else None
        skipped = list(dict.fromkeys(exceptions))
        weekdays = tuple(days_of_week) if days_of_week is not None else None
        occurrences = expand_occurrences(
            recurrence,
            frequency,
            start,
            end_date=end,
            end_after_occurrences=end_after_occurrences,
            days_of_week=weekdays,
            exceptions=skipped,
        )

        schedule_id = _new_id("rec")
        now = self._clock()
        appointments = [
            Appointment(
                id=_new_id("apt"),
                service_type=service_type,
                scheduled_date=occurrence,
                duration=duration,
                location_type=location_type,
                location=location,
                status=AppointmentStatus.SCHEDULED,
                customer=customer,
                recurring_schedule_id=schedule_id,
                created_at=now,
            )
            for occurrence in occurrences
        ]
        schedule = RecurringSchedule(
            id=schedule_id,
            pattern=recurrence,
            frequency=frequency,
            start_time=start,
            duration=duration,
            service_type=service_type,
            days_of_week=weekdays,
            end_date=end,
            end_after_occurrences=end_after_occurrences,
            exceptions=skipped,
            appointments=appointments,
        )

        with self._store.lock:
            for appointment in appointments:
                self._store.put(appointment)
            self._store.put_schedule(schedule)
            self._persist("create_recurring_schedule")

        logger.info(
            "recurring_schedule_created",
            extra={
                "component": "scheduling_engine",
                "action": "create_recurring_schedule",
                "result": "created",
                "schedule_id": schedule_id,
                "pattern": recurrence.value,
                "occurrence_count": len(appointments),
            },
        )
        return schedule

    def add_recurring_exception(self, schedule_id: str, day: date) -> RecurringSchedule | None:
        """Adiciona data de exceção e cancela a ocorrência ativa daquele dia.

        Returns:
            Série atualizada, ou None se ``schedule_id`` não existe.
        """
        with self._store.lock:
            schedule = self._store.get_schedule(schedule_id)
            if schedule is None:
                return None
            if day not in schedule.exceptions:
                schedule = schedule.model_copy(update={"exceptions": [*schedule.exceptions, day]})
                self._store.put_schedule(schedule)

            cancelled: list[str] = []
            for generated in schedule.appointments:
                current = self._store.get(generated.id)
                if current is None or not current.is_active:
                    continue
                if self._calendar.localize(current.scheduled_date).date() != day:
                    continue
                self._store.put(
                    current.model_copy(
                        update={
                            "status": AppointmentStatus.CANCELLED,
                            "cancellation_reason": "recurring exception",
                        }
                    )
                )
                cancelled.append(current.id)
            self._persist("add_recurring_exception")

        logger.info(
            "recurring_exception_added",
            extra={
                "component": "scheduling_engine",
                "action": "add_recurring_exception",
                "result": "ok",
                "schedule_id": schedule_id,
                "cancelled_count": len(cancelled),
            },
        )
        return schedule

    def get_recurring_schedule(self, schedule_id: str) -> RecurringSchedule | None:
        return self._store.get_schedule(schedule_id)

    # Consultas

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        return self._store.get(appointment_id)

    def get_appointments(
        self,
        start: datetime,
        end: datetime,
        service_type: str | None = None,
    ) -> list[Appointment]:
        """Agendamentos com início em [start, end], em ordem cronológica."""
        return self._store.range_query(
            self._calendar.localize(start),
            self._calendar.localize(end),
            service_type,
        )

    def get_available_time_slots(self, query: AvailabilityQuery) -> list[TimeSlot]:
        """Slots legais pelo expediente e livres de conflito, em ordem cronológica."""
        duration = query.duration or self._service_duration(query.service_type)
        with self._store.lock:
            candidates = self._slots.generate_range(
                query.date,
                query.last_day,
                query.service_type,
                duration,
                query.preferred_times,
            )
            return self._conflicts.filter_available(candidates)

    def get_next_available_slot(
        self,
        service_type: str,
        duration: int | None = None,
        preferred: TimeOfDay = TimeOfDay.ANY,
    ) -> TimeSlot | None:
        """Primeiro slot livre a partir de agora, dentro do horizonte de antecedência."""
        length = duration or self._service_duration(service_type)
        today = self._calendar.localize(self._clock()).date()
        last_day = today + timedelta(days=self._policy.advance_booking_days)
        day = today
        with self._store.lock:
            while day <= last_day:
                candidates = self._slots.generate_slots(day, service_type, length, preferred)
                available = self._conflicts.filter_available(candidates, limit=1)
                if available:
                    return available[0]
                day += timedelta(days=1)
        return None

    # Internos

    def _service_duration(self, service_type: str) -> int:
        return self._policy.default_duration(service_type) or DEFAULT_SERVICE_DURATION

    def _reject_candidate(
        self,
        slot: TimeSlot,
        service_type: str,
        max_alternatives: int,
        exclude_appointment_id: str | None,
    ) -> SchedulingResult | None:
        """Falha (com alternativas) se o slot não pode ser ocupado, senão None."""
        check = self._conflicts.check(slot, exclude_appointment_id)
        if check.is_policy_violation and check.reason is not None:
            code = SchedulingErrorCode.POLICY_VIOLATION
            message = _REJECTION_MESSAGES[check.reason]
        elif not self._calendar.fits(slot.start_time, slot.end_time):
            code = SchedulingErrorCode.SLOT_UNAVAILABLE
            message = "Horário fora do expediente"
        elif not check.available and check.reason is not None:
            code = SchedulingErrorCode.SLOT_UNAVAILABLE
            message = _REJECTION_MESSAGES[check.reason]
        else:
            return None

        alternatives = self._find_alternatives(
            slot, service_type, max_alternatives, exclude_appointment_id
        )
        logger.info(
            "slot_rejected",
            extra={
                "component": "scheduling_engine",
                "action": "check_slot",
                "result": code.value,
                "reason": check.reason.value if check.reason else "outside_business_hours",
                "alternative_count": len(alternatives),
            },
        )
        return SchedulingResult.fail(code, message, alternatives)

    def _find_alternatives(
        self,
        requested: TimeSlot,
        service_type: str,
        limit: int,
        exclude_appointment_id: str | None,
    ) -> list[TimeSlot]:
        """Até ``limit`` slots livres na janela de +-7 dias, do mais cedo ao mais tarde."""
        day = self._calendar.localize(requested.start_time).date()
        window = timedelta(days=ALTERNATIVE_WINDOW_DAYS)
        candidates = self._slots.generate_range(
            day - window, day + window, service_type, requested.duration
        )
        return self._conflicts.filter_available(
            candidates, exclude_appointment_id=exclude_appointment_id, limit=limit
        )

    def _require(self, appointment_id: str) -> Appointment:
        appointment = self._store.get(appointment_id)
        if appointment is None:
            raise LookupError(f"Agendamento {appointment_id} sumiu do store")
        return appointment

    def _check_reschedule_policy(self, current: Appointment, initiated_by: str) -> str | None:
        rules = self._policy.reschedule
        if initiated_by == "customer" and not rules.allow_customer_reschedule:
            return "Remarcação pelo cliente não permitida"
        limit = rules.max_reschedules_per_booking
        if limit is not None and len(current.reschedule_history) >= limit:
            return f"Limite de {limit} remarcações atingido"
        return None
