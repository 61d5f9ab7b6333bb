"""Bootstrap do motor - inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from scheduling.bootstrap import build_scheduling_engine, initialize_app

    initialize_app()
    engine = build_scheduling_engine()
"""

from __future__ import annotations

import logging

from config.logging import configure_logging
from config.settings import get_base_settings, get_persistence_settings
from scheduling.bootstrap.dependencies import (
    build_reminder_scheduler,
    build_scheduling_engine,
    create_persistence_backend,
)
from scheduling.bootstrap.policy_loader import load_policy_file, load_scheduling_policy
from scheduling.observability import get_correlation_id
from utils.errors import ConfigurationError

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON com correlation_id. Chamar uma vez no boot."""
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em ``staging``/``production`` falha rápido para impedir boot inválido.
    Em ``development`` apenas registra alerta.
    """
    base = get_base_settings()
    errors: list[str] = [f"base: {error}" for error in base.validate()]
    errors.extend(f"persistence: {error}" for error in get_persistence_settings().validate(base))

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise ConfigurationError(f"Configuração inválida para {base.environment}:\n{details}")


__all__ = [
    "build_reminder_scheduler",
    "build_scheduling_engine",
    "create_persistence_backend",
    "initialize_app",
    "load_policy_file",
    "load_scheduling_policy",
    "validate_runtime_settings",
]
