"""Agregador de settings do motor de agendamento.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_REDIS_KEY,
    BaseSettings,
    Environment,
    PersistenceBackend,
    PersistenceSettings,
    get_base_settings,
    get_persistence_settings,
)

# Scheduling settings
from config.settings.scheduling import (
    SchedulingSettings,
    get_scheduling_settings,
)

__all__ = [
    "DEFAULT_REDIS_KEY",
    # Base
    "BaseSettings",
    "Environment",
    "PersistenceBackend",
    "PersistenceSettings",
    # Scheduling
    "SchedulingSettings",
    "get_base_settings",
    "get_persistence_settings",
    "get_scheduling_settings",
]
