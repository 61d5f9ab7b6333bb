"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.persistence import (
    DEFAULT_REDIS_KEY,
    PersistenceBackend,
    PersistenceSettings,
    get_persistence_settings,
)

__all__ = [
    "DEFAULT_REDIS_KEY",
    # Core
    "BaseSettings",
    # Types
    "Environment",
    "PersistenceBackend",
    # Persistence
    "PersistenceSettings",
    "get_base_settings",
    "get_persistence_settings",
]
