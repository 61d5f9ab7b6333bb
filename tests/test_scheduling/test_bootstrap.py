"""Testes do composition root (factories e validação de startup)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from config.settings import (
    PersistenceSettings,
    get_base_settings,
    get_persistence_settings,
    get_scheduling_settings,
)
from scheduling import bootstrap
from scheduling.bootstrap import dependencies
from scheduling.bootstrap.clients import create_redis_client
from scheduling.domain import DEFAULT_SCHEDULING_POLICY
from scheduling.infra.stores import MemoryPersistenceBackend, RedisPersistenceBackend
from tests.fakes.builders import NOW, local
from tests.fakes.fake_clock import FixedClock
from utils.errors import ConfigurationError


def _clear_caches() -> None:
    get_base_settings.cache_clear()
    get_persistence_settings.cache_clear()
    get_scheduling_settings.cache_clear()
    create_redis_client.cache_clear()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in ("ENVIRONMENT", "PERSISTENCE_BACKEND", "REDIS_URL", "SCHEDULING_POLICY_FILE"):
        monkeypatch.delenv(key, raising=False)
    _clear_caches()
    yield
    _clear_caches()


class TestCreatePersistenceBackend:
    def test_memory_backend(self) -> None:
        backend = dependencies.create_persistence_backend(PersistenceSettings())
        assert isinstance(backend, MemoryPersistenceBackend)

    def test_redis_backend_uses_configured_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = MagicMock()
        client.get.return_value = None
        monkeypatch.setattr(dependencies, "create_redis_client", lambda: client)

        backend = dependencies.create_persistence_backend(
            PersistenceSettings(backend="redis", redis_url="redis://x", redis_key="k:snap")
        )

        assert isinstance(backend, RedisPersistenceBackend)
        backend.load()
        client.get.assert_called_once_with("k:snap")

    def test_redis_client_requires_url(self) -> None:
        with pytest.raises(ConfigurationError):
            create_redis_client()


class TestBuildSchedulingEngine:
    def test_defaults_to_logging_collaborators(self) -> None:
        engine = bootstrap.build_scheduling_engine(
            DEFAULT_SCHEDULING_POLICY, clock=FixedClock(NOW)
        )

        result = engine.book_appointment(None, "teaching", local(2026, 6, 2, 9), 60)

        assert result.success is True
        assert result.appointment is not None
        assert result.appointment.calendar_invite_id == f"cal_{result.appointment.id}"

    def test_policy_is_loaded_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDULING_BUFFER_MINUTES", "0")

        engine = bootstrap.build_scheduling_engine(persistence=MemoryPersistenceBackend())

        assert engine.policy.buffer_minutes == 0

    def test_restores_saved_state(self) -> None:
        backend = MemoryPersistenceBackend()
        clock = FixedClock(NOW)
        first = bootstrap.build_scheduling_engine(persistence=backend, clock=clock)
        first.book_appointment(None, "teaching", local(2026, 6, 2, 9), 60)

        second = bootstrap.build_scheduling_engine(persistence=backend, clock=clock)

        assert len(second.store) == 1

    def test_reminder_scheduler_shares_store(self) -> None:
        clock = FixedClock(NOW)
        engine = bootstrap.build_scheduling_engine(
            persistence=MemoryPersistenceBackend(), clock=clock
        )
        engine.book_appointment(None, "teaching", local(2026, 6, 1, 9), 60)

        scheduler = bootstrap.build_reminder_scheduler(engine, clock=clock)
        clock.advance(hours=1)

        assert scheduler.tick()[0].lead_hours == 24
        assert engine.store.all()[0].reminders_sent == {"24h"}

    def test_reminder_scheduler_persists_through_engine_backend(self) -> None:
        clock = FixedClock(NOW)
        backend = MemoryPersistenceBackend()
        engine = bootstrap.build_scheduling_engine(persistence=backend, clock=clock)
        engine.book_appointment(None, "teaching", local(2026, 6, 1, 9), 60)
        scheduler = bootstrap.build_reminder_scheduler(engine, clock=clock)
        saves_before = backend.save_count

        clock.advance(hours=1)
        scheduler.tick()

        assert engine.persistence is backend
        assert backend.save_count == saves_before + 1
        appointments, _ = backend.load()
        assert next(iter(appointments.values())).reminders_sent == {"24h"}


class TestRuntimeValidation:
    def test_development_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERSISTENCE_BACKEND", "redis")
        bootstrap.validate_runtime_settings()

    def test_production_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(ConfigurationError, match="PERSISTENCE_BACKEND=memory"):
            bootstrap.validate_runtime_settings()

    def test_production_with_redis_passes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "redis")
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

        bootstrap.validate_runtime_settings()


def test_initialize_app_installs_json_handler() -> None:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        bootstrap.initialize_app()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
    finally:
        root.handlers = handlers
        root.setLevel(level)
