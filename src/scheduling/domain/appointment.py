"""Modelos de domínio para agendamentos.

Appointment é a raiz do agregado: criado por um agendamento bem
sucedido, alterado por remarcação/cancelamento e nunca removido.
TimeSlot é efêmero, produzido pelo gerador de slots e nunca persistido.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from fsm.states import AppointmentStatus
from scheduling.domain.policy import DayOfWeek


class LocationType(StrEnum):
    """Onde o atendimento acontece."""

    STUDIO = "studio"
    CLIENT_LOCATION = "client-location"
    ONLINE = "online"


class RecurrencePattern(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


Initiator = Literal["customer", "provider"]


class CustomerInfo(BaseModel):
    """Dados do cliente repassados aos colaboradores (calendário, notificação)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    first_name: str
    last_name: str
    email: str
    phone: str = ""
    preferred_contact_method: Literal["email", "phone", "text"] = "email"
    timezone: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TimeSlot(BaseModel):
    """Intervalo candidato [start_time, end_time) legal pelas regras de expediente."""

    model_config = ConfigDict(frozen=True)

    start_time: datetime = Field(..., description="Início do slot (timezone-aware).")
    end_time: datetime = Field(..., description="Fim do slot (exclusivo).")
    duration: int = Field(..., ge=1, description="Duração em minutos.")
    available: bool = True
    service_types: frozenset[str] = frozenset()

    @classmethod
    def starting_at(
        cls,
        start: datetime,
        duration: int,
        service_types: frozenset[str] = frozenset(),
    ) -> TimeSlot:
        return cls(
            start_time=start,
            end_time=start + timedelta(minutes=duration),
            duration=duration,
            service_types=service_types,
        )


class RescheduleEntry(BaseModel):
    """Entrada imutável do histórico de remarcações."""

    model_config = ConfigDict(frozen=True)

    original_date: datetime
    new_date: datetime
    reason: str
    initiated_by: Initiator = "customer"
    timestamp: datetime


class Appointment(BaseModel):
    """Agendamento confirmado no motor."""

    model_config = ConfigDict(extra="ignore")

    id: str
    service_type: str
    scheduled_date: datetime
    duration: int = Field(..., ge=1)
    location_type: LocationType = LocationType.STUDIO
    location: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    customer: CustomerInfo | None = None
    notes: str = ""
    reminders_sent: set[str] = Field(default_factory=set)
    reschedule_history: list[RescheduleEntry] = Field(default_factory=list)
    calendar_invite_id: str | None = None
    meeting_link: str | None = None
    cancellation_reason: str | None = None
    recurring_schedule_id: str | None = None
    created_at: datetime | None = None

    @property
    def end_time(self) -> datetime:
        return self.scheduled_date + timedelta(minutes=self.duration)

    @property
    def is_active(self) -> bool:
        return self.status not in (AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED)


class RecurringSchedule(BaseModel):
    """Modelo gerador de uma série limitada de agendamentos independentes.

    ``appointments`` é o retrato da série no momento da criação; o estado
    vivo de cada ocorrência fica no AppointmentStore. Após a geração só
    ``exceptions`` pode crescer.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    pattern: RecurrencePattern
    frequency: int = Field(default=1, ge=1)
    start_time: datetime
    duration: int = Field(..., ge=1)
    service_type: str = "teaching"
    days_of_week: tuple[DayOfWeek, ...] | None = None
    end_date: datetime | None = None
    end_after_occurrences: int | None = Field(default=None, ge=1)
    exceptions: list[date] = Field(default_factory=list)
    appointments: list[Appointment] = Field(default_factory=list)


__all__ = [
    "Appointment",
    "CustomerInfo",
    "Initiator",
    "LocationType",
    "RecurrencePattern",
    "RecurringSchedule",
    "RescheduleEntry",
    "TimeSlot",
]
