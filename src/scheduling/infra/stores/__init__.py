"""Store autoritativo e backends de persistência."""

from .appointment_store import AppointmentStore
from .memory_stores import MemoryPersistenceBackend
from .redis_snapshot_store import DEFAULT_SNAPSHOT_KEY, RedisPersistenceBackend
from .snapshot_codec import decode_snapshot, encode_snapshot, persist_snapshot

__all__ = [
    "DEFAULT_SNAPSHOT_KEY",
    "AppointmentStore",
    "MemoryPersistenceBackend",
    "RedisPersistenceBackend",
    "decode_snapshot",
    "encode_snapshot",
    "persist_snapshot",
]
