"""Backend de persistência em memória - apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
Guarda o snapshot já serializado para exercitar o mesmo caminho de
ida e volta (datas em ISO) dos backends reais.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scheduling.infra.stores.snapshot_codec import decode_snapshot, encode_snapshot
from scheduling.protocols.persistence import PersistenceBackendProtocol

if TYPE_CHECKING:
    from scheduling.domain.appointment import Appointment, RecurringSchedule


class MemoryPersistenceBackend(PersistenceBackendProtocol):
    """Backend de snapshot em memória - apenas para dev/test."""

    def __init__(self, initial: str | None = None) -> None:
        self._data: str | None = initial
        self.save_count = 0

    def save(
        self,
        appointments: dict[str, Appointment],
        schedules: dict[str, RecurringSchedule],
    ) -> None:
        self._data = encode_snapshot(appointments, schedules)
        self.save_count += 1

    def load(self) -> tuple[dict[str, Appointment], dict[str, RecurringSchedule]]:
        return decode_snapshot(self._data)

    @property
    def raw(self) -> str | None:
        """Snapshot serializado (apenas para testes)."""
        return self._data
