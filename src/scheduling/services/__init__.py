"""Serviços do motor de agendamento."""

from scheduling.services.business_calendar import BusinessCalendar, DayWindow
from scheduling.services.clock import Clock, utc_now
from scheduling.services.conflict_detector import ConflictCheck, ConflictDetector, ConflictReason
from scheduling.services.formatting import format_duration
from scheduling.services.recurrence import DEFAULT_MAX_OCCURRENCES, expand_occurrences
from scheduling.services.reminder_scheduler import ReminderEvent, ReminderScheduler
from scheduling.services.scheduling_engine import SchedulingEngine
from scheduling.services.slot_generator import SlotGenerator

__all__ = [
    "DEFAULT_MAX_OCCURRENCES",
    "BusinessCalendar",
    "Clock",
    "ConflictCheck",
    "ConflictDetector",
    "ConflictReason",
    "DayWindow",
    "ReminderEvent",
    "ReminderScheduler",
    "SchedulingEngine",
    "SlotGenerator",
    "expand_occurrences",
    "format_duration",
    "utc_now",
]
