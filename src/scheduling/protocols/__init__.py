"""Protocolos dos colaboradores externos do motor de agendamento."""

from .calendar_sync import CalendarSyncProtocol
from .meeting_link import MeetingLinkProviderProtocol
from .notification import NotificationDispatcherProtocol
from .persistence import PersistenceBackendProtocol

__all__ = [
    "CalendarSyncProtocol",
    "MeetingLinkProviderProtocol",
    "NotificationDispatcherProtocol",
    "PersistenceBackendProtocol",
]
