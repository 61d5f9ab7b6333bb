"""Calendário comercial: expediente, pausas e datas bloqueadas.

Função pura da política + data. Horários de parede são interpretados no
timezone da política; datetimes sem tzinfo são tratados como locais.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TYPE_CHECKING

from scheduling.domain.policy import DayOfWeek

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from scheduling.domain.policy import SchedulingPolicy


@dataclass(frozen=True, slots=True)
class BreakInterval:
    start: datetime
    end: datetime
    label: str = ""

    def intersects(self, start: datetime, end: datetime) -> bool:
        return start < self.end and end > self.start


@dataclass(frozen=True, slots=True)
class DayWindow:
    """Janela [open_at, close_at) de um dia aberto, com pausas concretas."""

    open_at: datetime
    close_at: datetime
    breaks: tuple[BreakInterval, ...] = ()

    def contains(self, start: datetime, end: datetime) -> bool:
        return self.open_at <= start and end <= self.close_at

    def intersecting_breaks(self, start: datetime, end: datetime) -> list[BreakInterval]:
        return [item for item in self.breaks if item.intersects(start, end)]


class BusinessCalendar:
    """Resolve a política de expediente em um predicado de disponibilidade por dia."""

    def __init__(self, policy: SchedulingPolicy) -> None:
        self._policy = policy
        self._zone = policy.zone

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    def localize(self, value: datetime) -> datetime:
        """Converte para o timezone da política (naive = horário local)."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self._zone)
        return value.astimezone(self._zone)

    def is_open(self, day: date) -> bool:
        if day in self._policy.closed_dates:
            return False
        return self._policy.business_hours[DayOfWeek.from_date(day)].is_open

    def day_window(self, day: date) -> DayWindow | None:
        """Janela do dia, ou None quando fechado."""
        if not self.is_open(day):
            return None
        hours = self._policy.business_hours[DayOfWeek.from_date(day)]
        return DayWindow(
            open_at=self._combine(day, hours.open_time),
            close_at=self._combine(day, hours.close_time),
            breaks=tuple(
                BreakInterval(
                    start=self._combine(day, item.start),
                    end=self._combine(day, item.end),
                    label=item.label,
                )
                for item in hours.breaks
            ),
        )

    def fits(self, start: datetime, end: datetime) -> bool:
        """Intervalo inteiro dentro do expediente e fora de pausas."""
        local_start = self.localize(start)
        window = self.day_window(local_start.date())
        if window is None:
            return False
        local_end = self.localize(end)
        if not window.contains(local_start, local_end):
            return False
        return not window.intersecting_breaks(local_start, local_end)

    def _combine(self, day: date, wall_clock: time) -> datetime:
        return datetime.combine(day, wall_clock, tzinfo=self._zone)
