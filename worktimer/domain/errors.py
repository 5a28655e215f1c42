"""
Timer error taxonomy.

Gateway failures are translated into these types so callers can react to the
kind of failure without knowing anything about HTTP.
"""

from typing import Optional


class TimerError(Exception):
    """Base class for every timer failure surfaced to callers"""

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TimerApiError(TimerError):
    """The backend answered, but not with a usable success response"""


class ConflictError(TimerApiError):
    """The backend reports that another timer is already running"""


class NotFoundError(TimerApiError):
    """The task or entry does not exist, is closed, or is not ours"""


class NetworkError(TimerError):
    """Transport failure, including timeouts"""


class TimerAlreadyRunningError(TimerError):
    """A start was attempted while a timer is running"""


class TimerNotRunningError(TimerError):
    """A stop was attempted while no timer is running"""


class TimerBusyError(TimerError):
    """Another timer operation is still waiting for the backend"""
