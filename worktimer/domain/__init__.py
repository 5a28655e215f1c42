"""Domain layer - Pure business entities and logic"""

from .models import (
    ActiveTimer, TaskEntries, TimeEntry, TimeSummary, TimerPhase, TimerState, UserPreferences
)
from .errors import (
    ConflictError, NetworkError, NotFoundError, TimerAlreadyRunningError, TimerApiError,
    TimerBusyError, TimerError, TimerNotRunningError
)

__all__ = [
    "ActiveTimer", "TaskEntries", "TimeEntry", "TimeSummary", "TimerPhase", "TimerState",
    "UserPreferences", "ConflictError", "NetworkError", "NotFoundError",
    "TimerAlreadyRunningError", "TimerApiError", "TimerBusyError", "TimerError",
    "TimerNotRunningError",
]
