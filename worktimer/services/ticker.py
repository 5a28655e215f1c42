"""
Tick scheduling for the local timer clock.

Architecture Decision: Explicit cancellation handle
The timer service asks a scheduler for a recurring one-second callback and
keeps the returned handle. Stopping the clock is then a visible call on that
handle instead of a side effect hidden in a widget. Tests inject a scheduler
driven by fake time.
"""

from abc import ABC, abstractmethod
from typing import Callable

from PySide6.QtCore import QTimer


class TickHandle(ABC):
    """A running recurring callback that can be cancelled exactly once"""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the recurring callback. Calling it again is a no-op."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """True until cancel() has been called"""


class TickScheduler(ABC):
    """Creates recurring once-per-second callbacks"""

    @abstractmethod
    def schedule(self, callback: Callable[[], None]) -> TickHandle:
        """Start calling `callback` once per tick interval"""


class QtTickHandle(TickHandle):

    def __init__(self, timer: QTimer):
        self._timer = timer

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    @property
    def active(self) -> bool:
        return self._timer is not None


class QtTickScheduler(TickScheduler):
    """Ticks on the Qt event loop using a QTimer"""

    def __init__(self, interval_ms: int = 1000):
        self.interval_ms = interval_ms

    def schedule(self, callback: Callable[[], None]) -> TickHandle:
        timer = QTimer()
        timer.setInterval(self.interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        return QtTickHandle(timer)
