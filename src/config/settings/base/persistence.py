"""Settings de persistência do snapshot de agendamentos."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

PersistenceBackend = Literal["memory", "redis"]

DEFAULT_REDIS_KEY = "scheduling:snapshot"


@dataclass(frozen=True)
class PersistenceSettings:
    """Configurações do backend de persistência.

    Attributes:
        backend: Backend do snapshot (memory|redis)
        redis_url: URL de conexão Redis (obrigatória para redis)
        redis_key: Chave onde o snapshot é gravado
    """

    backend: PersistenceBackend = "memory"
    redis_url: str = ""
    redis_key: str = DEFAULT_REDIS_KEY

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de persistência.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in {"memory", "redis"}:
            errors.append(f"PERSISTENCE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("PERSISTENCE_BACKEND=memory proibido em staging/production")

        if self.backend == "redis" and not self.redis_url:
            errors.append("REDIS_URL obrigatório quando PERSISTENCE_BACKEND=redis")

        if not self.redis_key:
            errors.append("SCHEDULING_REDIS_KEY não pode ser vazio")

        return errors


def _load_persistence_from_env() -> PersistenceSettings:
    """Carrega PersistenceSettings de variáveis de ambiente."""
    backend_str = os.getenv("PERSISTENCE_BACKEND", "memory").lower()
    backend: PersistenceBackend = "redis" if backend_str == "redis" else "memory"
    return PersistenceSettings(
        backend=backend,
        redis_url=os.getenv("REDIS_URL", ""),
        redis_key=os.getenv("SCHEDULING_REDIS_KEY", DEFAULT_REDIS_KEY),
    )


@lru_cache(maxsize=1)
def get_persistence_settings() -> PersistenceSettings:
    """Retorna instância cacheada de PersistenceSettings."""
    return _load_persistence_from_env()
