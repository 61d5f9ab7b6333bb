"""Relógio injetável do motor."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def hours_between(start: datetime, end: datetime) -> float:
    """Horas de ``start`` até ``end`` (negativo se ``end`` já passou)."""
    return (end - start).total_seconds() / 3600
