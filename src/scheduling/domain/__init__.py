"""Modelos de domínio do motor de agendamento."""

from scheduling.domain.appointment import (
    Appointment,
    CustomerInfo,
    Initiator,
    LocationType,
    RecurrencePattern,
    RecurringSchedule,
    RescheduleEntry,
    TimeSlot,
)
from scheduling.domain.availability import AvailabilityQuery
from scheduling.domain.policy import (
    DEFAULT_SCHEDULING_POLICY,
    BreakWindow,
    DayHours,
    DayOfWeek,
    ReminderLeadTimes,
    ReschedulePolicy,
    SchedulingPolicy,
    ServiceDuration,
    TimeOfDay,
)
from scheduling.domain.results import CancellationResult, SchedulingErrorCode, SchedulingResult

__all__ = [
    "DEFAULT_SCHEDULING_POLICY",
    "Appointment",
    "AvailabilityQuery",
    "BreakWindow",
    "CancellationResult",
    "CustomerInfo",
    "DayHours",
    "DayOfWeek",
    "Initiator",
    "LocationType",
    "RecurrencePattern",
    "RecurringSchedule",
    "ReminderLeadTimes",
    "RescheduleEntry",
    "ReschedulePolicy",
    "SchedulingErrorCode",
    "SchedulingPolicy",
    "SchedulingResult",
    "ServiceDuration",
    "TimeOfDay",
    "TimeSlot",
]
