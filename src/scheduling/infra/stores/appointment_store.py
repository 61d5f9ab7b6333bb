"""AppointmentStore - dono autoritativo dos agendamentos em memória.

Leituras devolvem cópias profundas: quem consulta nunca altera o estado
sem passar por ``put``. O ``lock`` (reentrante) é compartilhado pelo
motor e pelo ReminderScheduler para serializar leitura-checagem-escrita.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from scheduling.domain.appointment import Appointment, RecurringSchedule


class AppointmentStore:
    """Mapa id -> Appointment e id -> RecurringSchedule protegido por lock."""

    def __init__(self) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._schedules: dict[str, RecurringSchedule] = {}
        self.lock = threading.RLock()

    # Agendamentos

    def put(self, appointment: Appointment) -> None:
        with self.lock:
            self._appointments[appointment.id] = appointment.model_copy(deep=True)

    def get(self, appointment_id: str) -> Appointment | None:
        with self.lock:
            stored = self._appointments.get(appointment_id)
            return stored.model_copy(deep=True) if stored is not None else None

    def all(self) -> list[Appointment]:
        """Todos os agendamentos, ordenados por data."""
        with self.lock:
            items = [item.model_copy(deep=True) for item in self._appointments.values()]
        return sorted(items, key=lambda item: item.scheduled_date)

    def range_query(
        self,
        start: datetime,
        end: datetime,
        service_type: str | None = None,
    ) -> list[Appointment]:
        """Agendamentos com início em [start, end], opcionalmente por serviço."""
        return [
            item
            for item in self.all()
            if start <= item.scheduled_date <= end
            and (service_type is None or item.service_type == service_type)
        ]

    def __len__(self) -> int:
        with self.lock:
            return len(self._appointments)

    def __contains__(self, appointment_id: object) -> bool:
        with self.lock:
            return appointment_id in self._appointments

    # Séries recorrentes

    def put_schedule(self, schedule: RecurringSchedule) -> None:
        with self.lock:
            self._schedules[schedule.id] = schedule.model_copy(deep=True)

    def get_schedule(self, schedule_id: str) -> RecurringSchedule | None:
        with self.lock:
            stored = self._schedules.get(schedule_id)
            return stored.model_copy(deep=True) if stored is not None else None

    def all_schedules(self) -> list[RecurringSchedule]:
        with self.lock:
            return [item.model_copy(deep=True) for item in self._schedules.values()]

    # Snapshot

    def snapshot(self) -> tuple[dict[str, Appointment], dict[str, RecurringSchedule]]:
        """Cópia consistente de ambos os mapas para persistência."""
        with self.lock:
            return (
                {key: value.model_copy(deep=True) for key, value in self._appointments.items()},
                {key: value.model_copy(deep=True) for key, value in self._schedules.items()},
            )

    def restore(
        self,
        appointments: dict[str, Appointment],
        schedules: dict[str, RecurringSchedule],
    ) -> None:
        """Substitui todo o estado (usado no carregamento inicial)."""
        with self.lock:
            self._appointments = {
                key: value.model_copy(deep=True) for key, value in appointments.items()
            }
            self._schedules = {key: value.model_copy(deep=True) for key, value in schedules.items()}
