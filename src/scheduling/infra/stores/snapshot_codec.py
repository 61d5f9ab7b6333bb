"""Serialização JSON do snapshot do motor.

Datas são gravadas em ISO-8601 e revividas pelo pydantic na leitura.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from scheduling.domain.appointment import Appointment, RecurringSchedule
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from scheduling.infra.stores.appointment_store import AppointmentStore
    from scheduling.protocols.persistence import PersistenceBackendProtocol

SNAPSHOT_VERSION = 1


def encode_snapshot(
    appointments: dict[str, Appointment],
    schedules: dict[str, RecurringSchedule],
) -> str:
    payload = {
        "version": SNAPSHOT_VERSION,
        "appointments": {key: value.model_dump(mode="json") for key, value in appointments.items()},
        "recurring_schedules": {
            key: value.model_dump(mode="json") for key, value in schedules.items()
        },
        "last_updated": datetime.now(tz=UTC).isoformat(),
    }
    return json.dumps(payload, sort_keys=True)


def decode_snapshot(
    raw: str | bytes | None,
) -> tuple[dict[str, Appointment], dict[str, RecurringSchedule]]:
    """Revive o snapshot salvo; ``None`` significa estado vazio."""
    if raw is None:
        return {}, {}
    try:
        payload: dict[str, Any] = json.loads(raw)
        appointments = {
            key: Appointment.model_validate(value)
            for key, value in payload.get("appointments", {}).items()
        }
        schedules = {
            key: RecurringSchedule.model_validate(value)
            for key, value in payload.get("recurring_schedules", {}).items()
        }
    except (json.JSONDecodeError, ValidationError, AttributeError, TypeError) as exc:
        raise PersistenceError(f"snapshot inválido: {exc}") from exc
    return appointments, schedules


def persist_snapshot(store: AppointmentStore, backend: PersistenceBackendProtocol) -> None:
    """Salva o estado atual do store no backend (propaga PersistenceError)."""
    appointments, schedules = store.snapshot()
    backend.save(appointments, schedules)
