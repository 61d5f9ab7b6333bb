"""Expansão de séries recorrentes em datas concretas.

Função pura: recebe o modelo da série e devolve os inícios das
ocorrências, preservando o horário de parede de ``start_time`` no seu
timezone. Datas em ``exceptions`` consomem uma ocorrência sem gerar
agendamento.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from scheduling.domain.appointment import RecurrencePattern
from scheduling.domain.policy import DayOfWeek
from utils.errors import SchedulingValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_MAX_OCCURRENCES = 52

# Limite de datas candidatas examinadas (protege contra séries sem fim)
MAX_CANDIDATE_STEPS = 10_000


def _add_months(day: date, months: int) -> date | None:
    """Mesmo dia do mês ``months`` adiante, ou None se o mês não tem esse dia."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    try:
        return day.replace(year=year, month=month)
    except ValueError:
        return None


def _daily(start: date, frequency: int) -> Iterator[date]:
    step = 0
    while True:
        yield start + timedelta(days=step * frequency)
        step += 1


def _weekly(start: date, frequency: int, days: tuple[DayOfWeek, ...]) -> Iterator[date]:
    week_start = start - timedelta(days=start.weekday())
    offsets = sorted({day.index for day in days})
    block = 0
    while True:
        base = week_start + timedelta(weeks=block * frequency)
        for offset in offsets:
            candidate = base + timedelta(days=offset)
            if candidate >= start:
                yield candidate
        block += 1


def _monthly(start: date, frequency: int) -> Iterator[date | None]:
    step = 0
    while True:
        yield _add_months(start, step * frequency)
        step += 1


def expand_occurrences(
    pattern: RecurrencePattern,
    frequency: int,
    start_time: datetime,
    *,
    end_date: datetime | None = None,
    end_after_occurrences: int | None = None,
    days_of_week: Iterable[DayOfWeek] | None = None,
    exceptions: Iterable[date] = (),
) -> list[datetime]:
    """Inícios das ocorrências da série, em ordem cronológica.

    Para ao ultrapassar ``end_date`` ou ao atingir ``end_after_occurrences``
    (o que vier primeiro). Sem limite informado vale DEFAULT_MAX_OCCURRENCES.

    Raises:
        SchedulingValidationError: frequência ou limite inválidos
    """
    if frequency < 1:
        raise SchedulingValidationError("frequency deve ser >= 1")
    if end_after_occurrences is not None and end_after_occurrences < 1:
        raise SchedulingValidationError("end_after_occurrences deve ser >= 1")
    if start_time.tzinfo is None:
        raise SchedulingValidationError("start_time deve ter timezone")
    if end_date is not None and end_date < start_time:
        raise SchedulingValidationError("end_date anterior ao início da série")

    limit = end_after_occurrences or DEFAULT_MAX_OCCURRENCES
    skipped = set(exceptions)
    wall_clock = start_time.timetz()
    start_day = start_time.date()

    candidates: Iterator[date | None]
    if pattern == RecurrencePattern.DAILY:
        candidates = _daily(start_day, frequency)
    elif pattern == RecurrencePattern.WEEKLY:
        days = tuple(days_of_week or ()) or (DayOfWeek.from_date(start_day),)
        candidates = _weekly(start_day, frequency, days)
    else:
        candidates = _monthly(start_day, frequency)

    occurrences: list[datetime] = []
    counted = 0
    for steps, candidate in enumerate(candidates):
        if counted >= limit or steps >= MAX_CANDIDATE_STEPS:
            break
        if candidate is None:
            continue
        occurrence = datetime.combine(candidate, wall_clock)
        if end_date is not None and occurrence > end_date:
            break
        counted += 1
        if candidate in skipped:
            continue
        occurrences.append(occurrence)
    return occurrences
