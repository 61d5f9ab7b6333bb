"""Detecção de conflitos entre um slot candidato e o que já está agendado.

Ordem das checagens:
1. início no passado ou além do horizonte de antecedência
2. sobreposição par-a-par (intervalos semiabertos, buffer aplicado)
3. limite de agendamentos simultâneos
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from fsm.states import AppointmentStatus
from scheduling.services.clock import Clock, utc_now

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment, TimeSlot
    from scheduling.domain.policy import SchedulingPolicy
    from scheduling.infra.stores.appointment_store import AppointmentStore

logger = logging.getLogger(__name__)


class ConflictReason(StrEnum):
    IN_PAST = "in_past"
    BEYOND_HORIZON = "beyond_horizon"
    OVERLAP = "overlap"
    CAPACITY = "capacity"


# Motivos que são violação de política (não conflito de agenda)
POLICY_REASONS = frozenset({ConflictReason.IN_PAST, ConflictReason.BEYOND_HORIZON})


@dataclass(frozen=True, slots=True)
class ConflictCheck:
    available: bool
    reason: ConflictReason | None = None
    conflicting_ids: tuple[str, ...] = ()

    @property
    def is_policy_violation(self) -> bool:
        return self.reason in POLICY_REASONS


def intervals_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    """Teste de sobreposição de intervalos semiabertos [start, end)."""
    return start_a < end_b and end_a > start_b


class ConflictDetector:
    """Filtra slots contra o AppointmentStore e os limites da política."""

    def __init__(
        self,
        policy: SchedulingPolicy,
        store: AppointmentStore,
        clock: Clock = utc_now,
    ) -> None:
        self._policy = policy
        self._store = store
        self._clock = clock
        self._buffer = timedelta(minutes=policy.buffer_minutes)

    def is_available(self, slot: TimeSlot, exclude_appointment_id: str | None = None) -> bool:
        return self.check(slot, exclude_appointment_id).available

    def check(self, slot: TimeSlot, exclude_appointment_id: str | None = None) -> ConflictCheck:
        now = self._clock()
        if slot.start_time < now:
            return ConflictCheck(available=False, reason=ConflictReason.IN_PAST)
        horizon = now + timedelta(days=self._policy.advance_booking_days)
        if slot.start_time > horizon:
            return ConflictCheck(available=False, reason=ConflictReason.BEYOND_HORIZON)

        with self._store.lock:
            active = [
                item
                for item in self._store.all()
                if item.status != AppointmentStatus.CANCELLED
                and item.id != exclude_appointment_id
            ]

        overlapping = [item for item in active if self._overlaps_with_buffer(slot, item)]
        if overlapping:
            return ConflictCheck(
                available=False,
                reason=ConflictReason.OVERLAP,
                conflicting_ids=tuple(item.id for item in overlapping),
            )

        concurrent = sum(
            1
            for item in active
            if intervals_overlap(slot.start_time, slot.end_time, item.scheduled_date, item.end_time)
        )
        if concurrent >= self._policy.max_concurrent_appointments:
            return ConflictCheck(available=False, reason=ConflictReason.CAPACITY)
        return ConflictCheck(available=True)

    def filter_available(
        self,
        slots: list[TimeSlot],
        exclude_appointment_id: str | None = None,
        limit: int | None = None,
    ) -> list[TimeSlot]:
        """Slots que passam em ``is_available``, na ordem recebida."""
        available: list[TimeSlot] = []
        for slot in slots:
            if limit is not None and len(available) >= limit:
                break
            if self.is_available(slot, exclude_appointment_id):
                available.append(slot)
        return available

    def _overlaps_with_buffer(self, slot: TimeSlot, existing: Appointment) -> bool:
        # Buffer é intervalo ocioso obrigatório após cada agendamento
        return intervals_overlap(
            slot.start_time,
            slot.end_time + self._buffer,
            existing.scheduled_date,
            existing.end_time + self._buffer,
        )
