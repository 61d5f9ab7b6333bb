"""Política de agendamento: expediente, pausas, durações e limites.

Todas as regras de configuração são validadas na construção do modelo
(pydantic), nunca a cada chamada do motor.
"""

from __future__ import annotations

from datetime import date, time
from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DayOfWeek(StrEnum):
    """Dias da semana na ordem de ``date.weekday()``."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, value: date) -> DayOfWeek:
        return _WEEKDAY_ORDER[value.weekday()]

    @property
    def index(self) -> int:
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER: tuple[DayOfWeek, ...] = tuple(DayOfWeek)


class TimeOfDay(StrEnum):
    """Preferência de período do dia para filtrar slots."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANY = "any"


# Faixas [início, fim) em horas locais
TIME_OF_DAY_HOURS: dict[TimeOfDay, tuple[int, int]] = {
    TimeOfDay.MORNING: (6, 12),
    TimeOfDay.AFTERNOON: (12, 17),
    TimeOfDay.EVENING: (17, 21),
}


class BreakWindow(BaseModel):
    """Pausa dentro do expediente (ex: almoço)."""

    model_config = ConfigDict(frozen=True)

    start: time
    end: time
    label: str = ""

    @model_validator(mode="after")
    def _check_order(self) -> BreakWindow:
        if self.start >= self.end:
            raise ValueError(f"pausa '{self.label}' deve terminar após o início")
        return self


class DayHours(BaseModel):
    """Expediente de um dia da semana."""

    model_config = ConfigDict(frozen=True)

    is_open: bool = True
    open_time: time = time(9, 0)
    close_time: time = time(18, 0)
    breaks: tuple[BreakWindow, ...] = ()

    @field_validator("breaks")
    @classmethod
    def _sort_breaks(cls, value: tuple[BreakWindow, ...]) -> tuple[BreakWindow, ...]:
        return tuple(sorted(value, key=lambda item: item.start))

    @model_validator(mode="after")
    def _check_window(self) -> DayHours:
        if not self.is_open:
            return self
        if self.open_time >= self.close_time:
            raise ValueError("open_time deve ser anterior a close_time")
        previous_end: time | None = None
        for item in self.breaks:
            if item.start < self.open_time or item.end > self.close_time:
                raise ValueError(f"pausa '{item.label}' fora do expediente")
            if previous_end is not None and item.start < previous_end:
                raise ValueError("pausas não podem se sobrepor")
            previous_end = item.end
        return self


CLOSED_DAY = DayHours(is_open=False, open_time=time(0, 0), close_time=time(0, 0))


class ServiceDuration(BaseModel):
    """Duração padrão e opções oferecidas para um tipo de serviço (minutos)."""

    model_config = ConfigDict(frozen=True)

    default: int = Field(..., ge=1)
    options: tuple[int, ...] = ()

    @field_validator("options")
    @classmethod
    def _positive_options(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if any(option <= 0 for option in value):
            raise ValueError("opções de duração devem ser positivas")
        return value


class ReminderLeadTimes(BaseModel):
    """Antecedências de lembrete em horas, por canal."""

    model_config = ConfigDict(frozen=True)

    email: tuple[int, ...] = (24, 2)
    sms: tuple[int, ...] = (2,)

    @field_validator("email", "sms")
    @classmethod
    def _positive_hours(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if any(hours <= 0 for hours in value):
            raise ValueError("antecedência de lembrete deve ser > 0")
        return value

    def by_channel(self) -> dict[str, tuple[int, ...]]:
        return {"email": self.email, "sms": self.sms}


class ReschedulePolicy(BaseModel):
    """Regras de remarcação.

    A taxa é apenas reportada no resultado; cobrança fica fora do motor.
    ``fee_waiver_hours`` ausente herda ``cancellation_policy_hours``.
    """

    model_config = ConfigDict(frozen=True)

    allow_customer_reschedule: bool = True
    max_reschedules_per_booking: int | None = Field(default=None, ge=1)
    fee_amount: int = Field(default=1500, ge=0, description="Taxa em centavos.")
    fee_waiver_hours: float | None = Field(default=None, ge=0)


def _default_business_hours() -> dict[DayOfWeek, DayHours]:
    weekday = DayHours(open_time=time(9, 0), close_time=time(18, 0))
    return {
        DayOfWeek.MONDAY: DayHours(
            open_time=time(9, 0),
            close_time=time(18, 0),
            breaks=(BreakWindow(start=time(12, 0), end=time(13, 0), label="Lunch Break"),),
        ),
        DayOfWeek.TUESDAY: weekday,
        DayOfWeek.WEDNESDAY: weekday,
        DayOfWeek.THURSDAY: weekday,
        DayOfWeek.FRIDAY: weekday,
        DayOfWeek.SATURDAY: DayHours(open_time=time(10, 0), close_time=time(16, 0)),
        DayOfWeek.SUNDAY: CLOSED_DAY,
    }


def _default_service_durations() -> dict[str, ServiceDuration]:
    return {
        "teaching": ServiceDuration(default=60, options=(30, 45, 60, 90)),
        "performance": ServiceDuration(default=120, options=(60, 120, 180, 240)),
        "collaboration": ServiceDuration(default=90, options=(60, 90, 120, 180)),
    }


class SchedulingPolicy(BaseModel):
    """Configuração completa consumida pelo motor de agendamento."""

    model_config = ConfigDict(frozen=True)

    timezone: str = "America/New_York"
    business_hours: dict[DayOfWeek, DayHours] = Field(default_factory=_default_business_hours)
    service_durations: dict[str, ServiceDuration] = Field(
        default_factory=_default_service_durations
    )
    buffer_minutes: int = Field(default=15, ge=0)
    advance_booking_days: int = Field(default=60, ge=0)
    cancellation_policy_hours: float = Field(default=24, ge=0)
    reminder_lead_times: ReminderLeadTimes = Field(default_factory=ReminderLeadTimes)
    max_concurrent_appointments: int = Field(default=3, ge=1)
    blocked_dates: frozenset[date] = frozenset()
    holiday_dates: frozenset[date] = frozenset()
    reschedule: ReschedulePolicy = Field(default_factory=ReschedulePolicy)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"timezone desconhecido: {value}") from exc
        return value

    @field_validator("business_hours")
    @classmethod
    def _fill_missing_days(cls, value: dict[DayOfWeek, DayHours]) -> dict[DayOfWeek, DayHours]:
        # Dia ausente na configuração conta como fechado
        return {day: value.get(day, CLOSED_DAY) for day in DayOfWeek}

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def reschedule_fee_waiver_hours(self) -> float:
        waiver = self.reschedule.fee_waiver_hours
        return self.cancellation_policy_hours if waiver is None else waiver

    @property
    def closed_dates(self) -> frozenset[date]:
        return self.blocked_dates | self.holiday_dates

    def default_duration(self, service_type: str) -> int | None:
        durations = self.service_durations.get(service_type)
        return durations.default if durations else None


DEFAULT_SCHEDULING_POLICY = SchedulingPolicy()


__all__ = [
    "CLOSED_DAY",
    "DEFAULT_SCHEDULING_POLICY",
    "TIME_OF_DAY_HOURS",
    "BreakWindow",
    "DayHours",
    "DayOfWeek",
    "ReminderLeadTimes",
    "ReschedulePolicy",
    "SchedulingPolicy",
    "ServiceDuration",
    "TimeOfDay",
]
