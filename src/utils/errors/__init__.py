"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    CollaboratorError,
    ConfigurationError,
    InfrastructureError,
    PersistenceError,
    SchedulingError,
    SchedulingValidationError,
)

__all__ = [
    "CollaboratorError",
    "ConfigurationError",
    "InfrastructureError",
    "PersistenceError",
    "SchedulingError",
    "SchedulingValidationError",
]
