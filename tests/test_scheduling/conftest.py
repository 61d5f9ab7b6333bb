"""Fixtures compartilhadas dos testes do motor de agendamento."""

from __future__ import annotations

import pytest

from scheduling.domain.policy import DEFAULT_SCHEDULING_POLICY, SchedulingPolicy
from scheduling.infra.stores import AppointmentStore, MemoryPersistenceBackend
from scheduling.services import SchedulingEngine
from tests.fakes.builders import NOW
from tests.fakes.fake_clock import FixedClock
from tests.fakes.fake_collaborators import (
    FakeCalendarSync,
    FakeMeetingLinkProvider,
    FakeNotificationDispatcher,
)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def policy() -> SchedulingPolicy:
    return DEFAULT_SCHEDULING_POLICY


@pytest.fixture
def store() -> AppointmentStore:
    return AppointmentStore()


@pytest.fixture
def persistence() -> MemoryPersistenceBackend:
    return MemoryPersistenceBackend()


@pytest.fixture
def calendar_sync() -> FakeCalendarSync:
    return FakeCalendarSync()


@pytest.fixture
def meeting_links() -> FakeMeetingLinkProvider:
    return FakeMeetingLinkProvider()


@pytest.fixture
def notifier() -> FakeNotificationDispatcher:
    return FakeNotificationDispatcher()


@pytest.fixture
def engine(
    policy: SchedulingPolicy,
    store: AppointmentStore,
    persistence: MemoryPersistenceBackend,
    calendar_sync: FakeCalendarSync,
    meeting_links: FakeMeetingLinkProvider,
    notifier: FakeNotificationDispatcher,
    clock: FixedClock,
) -> SchedulingEngine:
    return SchedulingEngine(
        policy,
        store=store,
        persistence=persistence,
        calendar_sync=calendar_sync,
        meeting_links=meeting_links,
        notifier=notifier,
        clock=clock,
    )
