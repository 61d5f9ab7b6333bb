"""Settings do motor de agendamento.

Valores ausentes (None) mantêm o que vier do arquivo de política ou os
padrões de SchedulingPolicy.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SchedulingSettings(BaseModel):
    """Overrides de política lidos do ambiente."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    timezone: str | None = Field(
        default=None,
        description="Timezone IANA do expediente (ex: America/New_York).",
    )
    buffer_minutes: int | None = Field(
        default=None,
        ge=0,
        description="Intervalo obrigatório após cada agendamento.",
    )
    advance_booking_days: int | None = Field(
        default=None,
        ge=0,
        description="Horizonte máximo de agendamento em dias.",
    )
    cancellation_policy_hours: float | None = Field(
        default=None,
        ge=0,
        description="Antecedência mínima para cancelamento gratuito.",
    )
    max_concurrent_appointments: int | None = Field(
        default=None,
        ge=1,
        description="Limite de agendamentos simultâneos.",
    )
    policy_file: str | None = Field(
        default=None,
        description="Caminho de um arquivo YAML com a política completa.",
    )

    def policy_overrides(self) -> dict[str, Any]:
        """Campos de SchedulingPolicy definidos no ambiente."""
        return self.model_dump(exclude={"policy_file"}, exclude_none=True)


def _read_optional_env(key: str) -> str | None:
    """Retorna valor opcional da env sem propagar string vazia."""
    raw_value = os.getenv(key)
    if raw_value is None:
        return None
    stripped_value = raw_value.strip()
    return stripped_value or None


def _load_scheduling_from_env() -> SchedulingSettings:
    """Carrega SchedulingSettings a partir de variáveis de ambiente.

    Conversão de tipos fica a cargo do pydantic (ex: "15" -> 15).
    """
    return SchedulingSettings.model_validate(
        {
            "timezone": _read_optional_env("SCHEDULING_TIMEZONE"),
            "buffer_minutes": _read_optional_env("SCHEDULING_BUFFER_MINUTES"),
            "advance_booking_days": _read_optional_env("SCHEDULING_ADVANCE_BOOKING_DAYS"),
            "cancellation_policy_hours": _read_optional_env(
                "SCHEDULING_CANCELLATION_POLICY_HOURS"
            ),
            "max_concurrent_appointments": _read_optional_env(
                "SCHEDULING_MAX_CONCURRENT_APPOINTMENTS"
            ),
            "policy_file": _read_optional_env("SCHEDULING_POLICY_FILE"),
        }
    )


@lru_cache(maxsize=1)
def get_scheduling_settings() -> SchedulingSettings:
    """Retorna instância cacheada de SchedulingSettings."""
    return _load_scheduling_from_env()


__all__ = ["SchedulingSettings", "get_scheduling_settings"]
