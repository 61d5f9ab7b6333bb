"""Factories do motor e dos backends baseadas em configuração de ambiente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.settings import get_base_settings, get_persistence_settings
from scheduling.bootstrap.clients import create_redis_client
from scheduling.bootstrap.policy_loader import load_scheduling_policy
from scheduling.infra.collaborators import (
    LoggingCalendarSync,
    LoggingNotificationDispatcher,
    StaticMeetingLinkProvider,
)
from scheduling.infra.stores import MemoryPersistenceBackend, RedisPersistenceBackend
from scheduling.services import ReminderScheduler, SchedulingEngine, utc_now
from utils.errors import ConfigurationError

if TYPE_CHECKING:
    from config.settings import PersistenceSettings
    from scheduling.domain.policy import SchedulingPolicy
    from scheduling.infra.stores import AppointmentStore
    from scheduling.protocols import (
        CalendarSyncProtocol,
        MeetingLinkProviderProtocol,
        NotificationDispatcherProtocol,
        PersistenceBackendProtocol,
    )
    from scheduling.services import Clock

logger = logging.getLogger(__name__)


def create_persistence_backend(
    settings: PersistenceSettings | None = None,
) -> PersistenceBackendProtocol:
    """Cria backend de persistência baseado na configuração."""
    settings = settings or get_persistence_settings()

    if settings.backend == "redis":
        backend: PersistenceBackendProtocol = RedisPersistenceBackend(
            create_redis_client(), key=settings.redis_key
        )
        logger.info("persistence_backend_created", extra={"backend": "redis"})
        return backend

    if settings.backend == "memory":
        environment = get_base_settings().environment
        if environment != "development":
            logger.warning(
                "memory_backend_in_non_dev",
                extra={"backend": "memory", "environment": environment},
            )
        logger.info("persistence_backend_created", extra={"backend": "memory"})
        return MemoryPersistenceBackend()

    raise ConfigurationError(f"PERSISTENCE_BACKEND inválido: {settings.backend}")


def build_scheduling_engine(
    policy: SchedulingPolicy | None = None,
    *,
    store: AppointmentStore | None = None,
    persistence: PersistenceBackendProtocol | None = None,
    calendar_sync: CalendarSyncProtocol | None = None,
    meeting_links: MeetingLinkProviderProtocol | None = None,
    notifier: NotificationDispatcherProtocol | None = None,
    clock: Clock = utc_now,
) -> SchedulingEngine:
    """Monta o motor; colaboradores ausentes usam os adaptadores de log.

    Carrega o snapshot salvo (PersistenceError propaga: boot inválido).
    """
    engine = SchedulingEngine(
        policy or load_scheduling_policy(),
        store=store,
        persistence=persistence or create_persistence_backend(),
        calendar_sync=calendar_sync or LoggingCalendarSync(),
        meeting_links=meeting_links or StaticMeetingLinkProvider(),
        notifier=notifier or LoggingNotificationDispatcher(),
        clock=clock,
    )
    logger.info(
        "scheduling_engine_built",
        extra={
            "component": "bootstrap",
            "result": "ok",
            "appointment_count": len(engine.store),
        },
    )
    return engine


def build_reminder_scheduler(
    engine: SchedulingEngine,
    *,
    dispatcher: NotificationDispatcherProtocol | None = None,
    persistence: PersistenceBackendProtocol | None = None,
    clock: Clock = utc_now,
) -> ReminderScheduler:
    """ReminderScheduler compartilhando store (e lock) e backend com o motor.

    Sem ``persistence`` explícito, usa o backend do motor para que
    ``reminders_sent`` sobreviva a reinícios.
    """
    return ReminderScheduler(
        engine.store,
        engine.policy,
        dispatcher or LoggingNotificationDispatcher(),
        persistence=persistence if persistence is not None else engine.persistence,
        clock=clock,
    )
