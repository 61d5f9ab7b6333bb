"""Testes das settings carregadas do ambiente."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from config.settings import (
    DEFAULT_REDIS_KEY,
    BaseSettings,
    PersistenceSettings,
    get_base_settings,
    get_persistence_settings,
    get_scheduling_settings,
)

_ENV_KEYS = (
    "ENVIRONMENT",
    "SERVICE_NAME",
    "DEBUG",
    "LOG_LEVEL",
    "PERSISTENCE_BACKEND",
    "REDIS_URL",
    "SCHEDULING_REDIS_KEY",
    "SCHEDULING_TIMEZONE",
    "SCHEDULING_BUFFER_MINUTES",
    "SCHEDULING_ADVANCE_BOOKING_DAYS",
    "SCHEDULING_CANCELLATION_POLICY_HOURS",
    "SCHEDULING_MAX_CONCURRENT_APPOINTMENTS",
    "SCHEDULING_POLICY_FILE",
)


def _clear_caches() -> None:
    get_base_settings.cache_clear()
    get_persistence_settings.cache_clear()
    get_scheduling_settings.cache_clear()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    _clear_caches()
    yield
    _clear_caches()


class TestBaseSettings:
    """Testes de BaseSettings."""

    def test_defaults(self) -> None:
        settings = get_base_settings()

        assert settings.environment == "development"
        assert settings.service_name == "scheduling-engine"
        assert settings.log_level == "INFO"
        assert settings.is_development is True
        assert settings.validate() == []

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("prod", "production"), ("STAGE", "staging"), ("qa", "development")],
    )
    def test_environment_aliases(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", raw)
        assert get_base_settings().environment == expected

    def test_debug_lowers_default_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEBUG", "true")

        settings = get_base_settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_empty_service_name_is_invalid(self) -> None:
        assert BaseSettings(service_name="").validate() == ["SERVICE_NAME não pode ser vazio"]

    def test_settings_are_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_base_settings()
        monkeypatch.setenv("SERVICE_NAME", "outro")

        assert get_base_settings() is first


class TestPersistenceSettings:
    """Testes de PersistenceSettings."""

    def test_defaults_to_memory(self) -> None:
        settings = get_persistence_settings()

        assert settings.backend == "memory"
        assert settings.redis_key == DEFAULT_REDIS_KEY

    def test_reads_redis_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERSISTENCE_BACKEND", "REDIS")
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
        monkeypatch.setenv("SCHEDULING_REDIS_KEY", "tenant:snapshot")

        settings = get_persistence_settings()

        assert settings.backend == "redis"
        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.redis_key == "tenant:snapshot"

    def test_memory_is_rejected_outside_development(self) -> None:
        errors = PersistenceSettings(backend="memory").validate(
            BaseSettings(environment="production")
        )
        assert errors == ["PERSISTENCE_BACKEND=memory proibido em staging/production"]

    def test_redis_requires_url(self) -> None:
        errors = PersistenceSettings(backend="redis").validate(BaseSettings())
        assert errors == ["REDIS_URL obrigatório quando PERSISTENCE_BACKEND=redis"]


class TestSchedulingSettings:
    """Testes de SchedulingSettings."""

    def test_no_overrides_by_default(self) -> None:
        settings = get_scheduling_settings()

        assert settings.policy_file is None
        assert settings.policy_overrides() == {}

    def test_env_values_are_coerced(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDULING_TIMEZONE", "Europe/Lisbon")
        monkeypatch.setenv("SCHEDULING_BUFFER_MINUTES", "10")
        monkeypatch.setenv("SCHEDULING_CANCELLATION_POLICY_HOURS", "12.5")
        monkeypatch.setenv("SCHEDULING_POLICY_FILE", "/etc/scheduling/policy.yaml")

        settings = get_scheduling_settings()

        assert settings.policy_file == "/etc/scheduling/policy.yaml"
        assert settings.policy_overrides() == {
            "timezone": "Europe/Lisbon",
            "buffer_minutes": 10,
            "cancellation_policy_hours": 12.5,
        }

    def test_blank_values_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDULING_BUFFER_MINUTES", "   ")
        assert get_scheduling_settings().buffer_minutes is None

    def test_invalid_value_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCHEDULING_MAX_CONCURRENT_APPOINTMENTS", "0")
        with pytest.raises(ValidationError):
            get_scheduling_settings()
