"""Backend de persistência em Redis.

O snapshot completo fica em uma única chave (JSON). Escrita via SET,
sem TTL: o snapshot só é substituído pelo próximo save.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from scheduling.infra.stores.snapshot_codec import decode_snapshot, encode_snapshot
from scheduling.protocols.persistence import PersistenceBackendProtocol
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from redis import Redis

    from scheduling.domain.appointment import Appointment, RecurringSchedule

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_KEY = "scheduling:snapshot"


class RedisPersistenceBackend(PersistenceBackendProtocol):
    """Backend de snapshot usando Redis.

    Args:
        redis_client: Cliente Redis síncrono
        key: Chave onde o snapshot é gravado
    """

    def __init__(self, redis_client: Redis[bytes], key: str = DEFAULT_SNAPSHOT_KEY) -> None:
        self._redis = redis_client
        self._key = key

    def save(
        self,
        appointments: dict[str, Appointment],
        schedules: dict[str, RecurringSchedule],
    ) -> None:
        data = encode_snapshot(appointments, schedules)
        try:
            self._redis.set(self._key, data)
        except RedisError as exc:
            raise PersistenceError(f"falha ao salvar snapshot em {self._key}") from exc
        logger.debug(
            "snapshot_saved",
            extra={"key": self._key, "appointments": len(appointments)},
        )

    def load(self) -> tuple[dict[str, Appointment], dict[str, RecurringSchedule]]:
        try:
            data = self._redis.get(self._key)
        except RedisError as exc:
            raise PersistenceError(f"falha ao carregar snapshot de {self._key}") from exc
        appointments, schedules = decode_snapshot(data)
        logger.info(
            "snapshot_loaded",
            extra={"key": self._key, "appointments": len(appointments)},
        )
        return appointments, schedules
