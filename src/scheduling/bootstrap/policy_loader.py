"""Carregamento da política de agendamento (YAML + overrides de ambiente).

Formato do arquivo (todas as chaves opcionais)::

    timezone: America/New_York
    buffer_minutes: 15
    business_hours:
      monday:
        open_time: "09:00"
        close_time: "18:00"
        breaks:
          - {start: "12:00", end: "13:00", label: Lunch Break}
      sunday:
        is_open: false
    blocked_dates: [2026-12-24]
"""

from __future__ import annotations

import logging
from datetime import time
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from config.settings import SchedulingSettings, get_scheduling_settings
from scheduling.domain.policy import SchedulingPolicy
from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

_CLOCK_KEYS = frozenset({"open_time", "close_time", "start", "end"})


def _normalize_clock_values(value: Any) -> Any:
    """Corrige horários que o YAML 1.1 lê como inteiro base 60 (12:00 -> 720)."""
    if isinstance(value, dict):
        return {
            key: (
                time(item // 60, item % 60)
                if key in _CLOCK_KEYS and isinstance(item, int) and not isinstance(item, bool)
                else _normalize_clock_values(item)
            )
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_normalize_clock_values(item) for item in value]
    return value


def load_policy_file(path: str | Path) -> dict[str, Any]:
    """Lê o arquivo YAML da política.

    Raises:
        ConfigurationError: arquivo ausente, YAML inválido ou raiz não-mapeamento
    """
    policy_path = Path(path)
    try:
        with policy_path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"arquivo de política ilegível: {policy_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"YAML de política inválido: {policy_path}") from exc

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError("arquivo de política deve ser um mapeamento YAML")
    return _normalize_clock_values(content)


def load_scheduling_policy(settings: SchedulingSettings | None = None) -> SchedulingPolicy:
    """Monta a SchedulingPolicy: padrões < arquivo YAML < ambiente.

    Raises:
        ConfigurationError: arquivo ilegível ou política inválida
    """
    settings = settings or get_scheduling_settings()
    data: dict[str, Any] = {}
    if settings.policy_file:
        data = load_policy_file(settings.policy_file)
    data.update(settings.policy_overrides())

    try:
        policy = SchedulingPolicy.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"política de agendamento inválida: {exc}") from exc

    logger.info(
        "scheduling_policy_loaded",
        extra={
            "component": "policy_loader",
            "result": "ok",
            "source": "file" if settings.policy_file else "defaults",
            "timezone": policy.timezone,
        },
    )
    return policy
