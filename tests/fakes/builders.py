"""Construtores de dados de teste (datas locais e agendamentos)."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from fsm.states import AppointmentStatus
from scheduling.domain.appointment import Appointment, CustomerInfo

NEW_YORK = ZoneInfo("America/New_York")

# Domingo; segunda 2026-06-01 é o primeiro dia útil
NOW = datetime(2026, 5, 31, 8, 0, tzinfo=NEW_YORK)


def local(year: int, month: int, day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=NEW_YORK)


def make_customer(first_name: str = "Ada") -> CustomerInfo:
    return CustomerInfo(
        first_name=first_name,
        last_name="Lovelace",
        email=f"{first_name.lower()}@example.com",
        phone="+1 555 0100",
    )


def make_appointment(
    appointment_id: str,
    start: datetime,
    duration: int = 60,
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    service_type: str = "teaching",
) -> Appointment:
    return Appointment(
        id=appointment_id,
        service_type=service_type,
        scheduled_date=start,
        duration=duration,
        status=status,
    )
