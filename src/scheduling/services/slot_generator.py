"""Geração de slots candidatos de duração fixa.

Um slot é legal apenas pelas regras de expediente: conflitos com
agendamentos existentes ficam com o ConflictDetector.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from scheduling.domain.appointment import TimeSlot
from scheduling.domain.policy import TIME_OF_DAY_HOURS, TimeOfDay
from utils.errors import SchedulingValidationError

if TYPE_CHECKING:
    from scheduling.domain.policy import SchedulingPolicy
    from scheduling.services.business_calendar import BusinessCalendar


def matches_time_of_day(start: datetime, preferred: TimeOfDay) -> bool:
    """Início do slot cai na faixa [início, fim) do período preferido."""
    if preferred == TimeOfDay.ANY:
        return True
    first_hour, last_hour = TIME_OF_DAY_HOURS[preferred]
    return first_hour <= start.hour < last_hour


class SlotGenerator:
    """Enumera slots por dia respeitando expediente, pausas, buffer e período."""

    def __init__(self, policy: SchedulingPolicy, calendar: BusinessCalendar) -> None:
        self._policy = policy
        self._calendar = calendar

    def generate_slots(
        self,
        day: date,
        service_type: str,
        duration: int,
        preferred: TimeOfDay = TimeOfDay.ANY,
    ) -> list[TimeSlot]:
        """Slots de um dia, em ordem cronológica.

        O cursor anda ``duration + buffer_minutes`` a partir da abertura.
        Candidato que cruza uma pausa é descartado e o cursor salta para o
        fim da pausa; candidato que termina após o fechamento encerra o dia.
        """
        if duration <= 0:
            raise SchedulingValidationError("duration deve ser > 0")
        window = self._calendar.day_window(day)
        if window is None:
            return []

        length = timedelta(minutes=duration)
        step = timedelta(minutes=duration + self._policy.buffer_minutes)
        service_types = frozenset({service_type})
        slots: list[TimeSlot] = []

        cursor = window.open_at
        while cursor + length <= window.close_at:
            end = cursor + length
            blocking = window.intersecting_breaks(cursor, end)
            if blocking:
                cursor = max(item.end for item in blocking)
                continue
            if matches_time_of_day(cursor, preferred):
                slots.append(TimeSlot.starting_at(cursor, duration, service_types))
            cursor += step
        return slots

    def generate_range(
        self,
        start_day: date,
        end_day: date,
        service_type: str,
        duration: int,
        preferred: TimeOfDay = TimeOfDay.ANY,
    ) -> list[TimeSlot]:
        """Concatena ``generate_slots`` para cada data de [start_day, end_day]."""
        slots: list[TimeSlot] = []
        day = start_day
        while day <= end_day:
            slots.extend(self.generate_slots(day, service_type, duration, preferred))
            day += timedelta(days=1)
        return slots
