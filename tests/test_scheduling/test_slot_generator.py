"""Testes do SlotGenerator."""

from __future__ import annotations

from datetime import date, time

import pytest

from scheduling.domain.policy import DayHours, DayOfWeek, SchedulingPolicy, TimeOfDay
from scheduling.services import BusinessCalendar, SlotGenerator
from tests.fakes.builders import local
from utils.errors import SchedulingValidationError

MONDAY = date(2026, 6, 1)
TUESDAY = date(2026, 6, 2)
SATURDAY = date(2026, 6, 6)
SUNDAY = date(2026, 5, 31)


@pytest.fixture
def generator() -> SlotGenerator:
    policy = SchedulingPolicy()
    return SlotGenerator(policy, BusinessCalendar(policy))


def _starts(slots) -> list[tuple[int, int]]:
    return [(slot.start_time.hour, slot.start_time.minute) for slot in slots]


class TestGenerateSlots:
    def test_monday_with_lunch_break(self, generator: SlotGenerator) -> None:
        slots = generator.generate_slots(MONDAY, "teaching", 60)

        assert slots[0].start_time == local(2026, 6, 1, 9)
        assert slots[0].end_time == local(2026, 6, 1, 10)
        assert slots[1].start_time == local(2026, 6, 1, 10, 15)
        assert slots[1].end_time == local(2026, 6, 1, 11, 15)
        assert slots[2].start_time == local(2026, 6, 1, 13)
        assert slots[2].end_time == local(2026, 6, 1, 14)
        assert _starts(slots) == [(9, 0), (10, 15), (13, 0), (14, 15), (15, 30), (16, 45)]

    def test_no_slot_ends_after_lunch_starts(self, generator: SlotGenerator) -> None:
        slots = generator.generate_slots(MONDAY, "teaching", 60)
        for slot in slots:
            starts_before_resume = slot.start_time < local(2026, 6, 1, 13)
            if local(2026, 6, 1, 11, 30) <= slot.start_time and starts_before_resume:
                pytest.fail(f"slot {slot.start_time} cruza a pausa de almoço")

    def test_day_without_breaks_steps_by_duration_plus_buffer(
        self, generator: SlotGenerator
    ) -> None:
        slots = generator.generate_slots(TUESDAY, "teaching", 60)
        assert _starts(slots) == [
            (9, 0), (10, 15), (11, 30), (12, 45), (14, 0), (15, 15), (16, 30)
        ]
        assert slots[-1].end_time <= local(2026, 6, 2, 18)

    def test_saturday_hours(self, generator: SlotGenerator) -> None:
        slots = generator.generate_slots(SATURDAY, "teaching", 60)
        assert _starts(slots) == [(10, 0), (11, 15), (12, 30), (13, 45), (15, 0)]

    def test_closed_day_yields_nothing(self, generator: SlotGenerator) -> None:
        assert generator.generate_slots(SUNDAY, "teaching", 60) == []

    def test_slots_carry_service_type_and_availability(self, generator: SlotGenerator) -> None:
        slot = generator.generate_slots(TUESDAY, "performance", 120)[0]
        assert slot.service_types == {"performance"}
        assert slot.available is True
        assert slot.duration == 120

    def test_duration_longer_than_day_yields_nothing(self, generator: SlotGenerator) -> None:
        assert generator.generate_slots(TUESDAY, "performance", 600) == []

    def test_non_positive_duration_is_rejected(self, generator: SlotGenerator) -> None:
        with pytest.raises(SchedulingValidationError):
            generator.generate_slots(TUESDAY, "teaching", 0)


class TestTimeOfDayPreference:
    def test_morning(self, generator: SlotGenerator) -> None:
        slots = generator.generate_slots(MONDAY, "teaching", 60, TimeOfDay.MORNING)
        assert _starts(slots) == [(9, 0), (10, 15)]

    def test_afternoon(self, generator: SlotGenerator) -> None:
        slots = generator.generate_slots(MONDAY, "teaching", 60, TimeOfDay.AFTERNOON)
        assert _starts(slots) == [(13, 0), (14, 15), (15, 30), (16, 45)]

    def test_evening_needs_late_hours(self) -> None:
        policy = SchedulingPolicy(
            business_hours={
                DayOfWeek.TUESDAY: DayHours(open_time=time(15, 0), close_time=time(21, 0))
            }
        )
        generator = SlotGenerator(policy, BusinessCalendar(policy))
        slots = generator.generate_slots(TUESDAY, "teaching", 60, TimeOfDay.EVENING)
        assert _starts(slots) == [(17, 30), (18, 45), (20, 0)]


class TestGenerateRange:
    def test_concatenates_days_in_order(self, generator: SlotGenerator) -> None:
        slots = generator.generate_range(SUNDAY, TUESDAY, "teaching", 60)
        assert len(slots) == 6 + 7
        starts = [slot.start_time for slot in slots]
        assert starts == sorted(starts)

    def test_every_slot_respects_business_hours(self) -> None:
        policy = SchedulingPolicy()
        calendar = BusinessCalendar(policy)
        generator = SlotGenerator(policy, calendar)
        for duration in (30, 45, 60, 90, 120):
            for slot in generator.generate_range(SUNDAY, date(2026, 6, 13), "teaching", duration):
                window = calendar.day_window(slot.start_time.date())
                assert window is not None
                assert window.contains(slot.start_time, slot.end_time)
                assert not window.intersecting_breaks(slot.start_time, slot.end_time)
