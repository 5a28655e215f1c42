"""Services layer - Business logic"""

from .timer_service import TimerService, get_timer_service, reset_timer_service
from .entry_history import EntryHistory, HistoryRow
from .ticker import QtTickScheduler, TickHandle, TickScheduler

__all__ = [
    "TimerService", "get_timer_service", "reset_timer_service", "EntryHistory", "HistoryRow",
    "QtTickScheduler", "TickHandle", "TickScheduler",
]
