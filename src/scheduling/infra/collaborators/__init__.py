"""Adaptadores de colaboradores externos (calendário, links, notificações)."""

from .logging_adapters import (
    DEFAULT_MEETING_BASE_URL,
    LoggingCalendarSync,
    LoggingNotificationDispatcher,
    StaticMeetingLinkProvider,
)

__all__ = [
    "DEFAULT_MEETING_BASE_URL",
    "LoggingCalendarSync",
    "LoggingNotificationDispatcher",
    "StaticMeetingLinkProvider",
]
