"""
Timer Service - Core time tracking logic.

Architecture Decision: Observer Pattern (Qt Signals)
The service emits signals when state changes, keeping it decoupled from UI.
Every surface renders the same TimerState; none of them keeps its own copy.

Architecture Decision: Confirmed updates only
The backend decides whether a timer runs. State changes are committed only
after the backend has confirmed them, so a failed call leaves the displayed
state exactly as it was.
"""

import asyncio
import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from worktimer.domain.errors import (
    TimerAlreadyRunningError, TimerBusyError, TimerError, TimerNotRunningError
)
from worktimer.domain.models import TimeEntry, TimerPhase, TimerState
from worktimer.infra.config import get_settings
from worktimer.infra.gateway import TimerGateway
from worktimer.services.ticker import QtTickScheduler, TickHandle, TickScheduler
from worktimer.utils import format_time

logger = logging.getLogger(__name__)


class TimerService(QObject):
    """
    The time tracking engine. Manages state but knows nothing about the UI.
    Emits signals when things change (Observer Pattern).
    """

    # Signals
    state_changed = Signal(object)  # TimerState
    loading_changed = Signal(bool)  # start/stop in flight
    tick = Signal(str, int)  # (formatted_time, elapsed_seconds)
    timer_started = Signal(str)  # task_id
    timer_stopped = Signal(str, int)  # task_id, final duration_seconds
    entries_changed = Signal(str)  # task_id whose recorded entries changed

    def __init__(self, gateway: TimerGateway, scheduler: Optional[TickScheduler] = None):
        super().__init__()
        self.gateway = gateway
        self.scheduler = scheduler or QtTickScheduler(get_settings().tick_interval_ms)

        self._state = TimerState.idle()
        self._tick_handle: Optional[TickHandle] = None
        self._loading = False

        # Bumped on every start/stop/shutdown commit so refresh results that
        # were fetched before the commit can be recognised and dropped.
        self._generation = 0
        self._refresh_task: Optional[asyncio.Future] = None

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_task is not None

    @property
    def has_live_tick(self) -> bool:
        return self._tick_handle is not None and self._tick_handle.active

    def is_running(self) -> bool:
        """Check if a timer is currently running"""
        return self._state.is_running

    def formatted_elapsed(self) -> str:
        return format_time(self._state.elapsed_seconds)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self, task_id: str, task_title: Optional[str] = None,
                    case_title: Optional[str] = None) -> TimeEntry:
        """
        Start tracking time for a task.

        Rejected locally while a timer runs; the backend still has the final
        word and may answer with ConflictError.
        """
        if self._state.is_running:
            raise TimerAlreadyRunningError(
                f"Timer already running on task {self._state.task_id}"
            )
        self._begin_operation()
        try:
            entry = await self.gateway.start_timer(str(task_id))
        finally:
            self._end_operation()

        self._generation += 1
        self._enter_running(TimerState(
            phase=TimerPhase.RUNNING,
            active_entry_id=entry.id,
            task_id=entry.task_id,
            task_title=task_title or entry.task_title,
            case_title=case_title or entry.case_title,
            elapsed_seconds=0,
        ))
        logger.info("Timer started on task %s (entry %s)", entry.task_id, entry.id)
        self.timer_started.emit(entry.task_id)
        self.entries_changed.emit(entry.task_id)
        return entry

    async def stop(self, description: Optional[str] = None) -> TimeEntry:
        """
        Stop the running timer, optionally attaching a description.

        On failure the timer keeps running locally so the user can retry.
        """
        before = self._state
        if not before.is_running:
            raise TimerNotRunningError("No timer is running")
        if description is not None:
            description = description.strip() or None

        self._begin_operation()
        try:
            entry = await self.gateway.stop_timer(before.active_entry_id, description)
        finally:
            self._end_operation()

        if self._state.active_entry_id != before.active_entry_id:
            logger.warning("Discarding stop response for superseded entry %s", entry.id)
            # The entry is closed on the backend even though the state moved on
            self.entries_changed.emit(before.task_id)
            return entry

        self._generation += 1
        self._enter_idle()
        logger.info("Timer stopped on task %s after %ss", before.task_id, entry.duration_seconds)
        self.timer_stopped.emit(before.task_id, entry.duration_seconds)
        self.entries_changed.emit(before.task_id)
        return entry

    async def refresh(self) -> TimerState:
        """
        Replace local state with the backend's view of the running timer.

        Safe to call at any time. Concurrent calls share one request.
        """
        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._fetch_and_apply())
            self._refresh_task.add_done_callback(self._clear_refresh_task)
        return await asyncio.shield(self._refresh_task)

    async def hydrate(self) -> TimerState:
        """
        Startup reconciliation. A failure is logged and leaves the service
        idle instead of blocking the application.
        """
        try:
            return await self.refresh()
        except TimerError as e:
            logger.warning("Could not load the active timer: %s", e)
            return self._state

    def shutdown(self):
        """Cancel the tick loop and forget the timer (teardown or logout)"""
        self._generation += 1
        self._enter_idle()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch_and_apply(self) -> TimerState:
        generation = self._generation
        active = await self.gateway.fetch_active_timer()

        if generation != self._generation:
            logger.warning("Discarding active timer fetched before a newer start/stop")
            return self._state

        current = self._state
        if active is None:
            self._enter_idle()
            self._announce_entry_switch(current, None)
            return self._state

        entry = active.entry
        same_entry = current.active_entry_id == entry.id
        task_title = entry.task_title or (current.task_title if same_entry else None)
        case_title = entry.case_title or (current.case_title if same_entry else None)
        if task_title is None:
            logger.warning("Active entry %s has no accessible task %s", entry.id, entry.task_id)

        self._enter_running(TimerState(
            phase=TimerPhase.RUNNING,
            active_entry_id=entry.id,
            task_id=entry.task_id,
            task_title=task_title,
            case_title=case_title,
            elapsed_seconds=active.elapsed_seconds,
        ))
        self._announce_entry_switch(current, entry)
        return self._state

    def _announce_entry_switch(self, previous: TimerState, entry: Optional[TimeEntry]):
        """Emit entries_changed for the tasks whose running entry a refresh ended or adopted"""
        if entry is not None and entry.id == previous.active_entry_id:
            return
        changed = []
        if previous.is_running:
            changed.append(previous.task_id)
        if entry is not None and entry.task_id not in changed:
            changed.append(entry.task_id)
        for task_id in changed:
            logger.info("Refresh found a different running entry for task %s", task_id)
            self.entries_changed.emit(task_id)

    def _clear_refresh_task(self, _task):
        self._refresh_task = None

    def _begin_operation(self):
        if self._loading:
            raise TimerBusyError("Another timer operation is in progress")
        self._loading = True
        self.loading_changed.emit(True)

    def _end_operation(self):
        self._loading = False
        self.loading_changed.emit(False)

    def _enter_running(self, state: TimerState):
        if not self.has_live_tick:
            self._tick_handle = self.scheduler.schedule(self._on_tick)
        self._set_state(state)

    def _enter_idle(self):
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        self._set_state(TimerState.idle())

    def _set_state(self, state: TimerState):
        if state == self._state:
            return
        self._state = state
        self.state_changed.emit(state)

    def _on_tick(self):
        """Called every second to advance the local clock"""
        if not self._state.is_running:
            return
        elapsed = self._state.elapsed_seconds + 1
        self._set_state(self._state.model_copy(update={"elapsed_seconds": elapsed}))
        self.tick.emit(format_time(elapsed), elapsed)


# Global timer service instance
_timer_service: Optional[TimerService] = None


def get_timer_service() -> TimerService:
    """Get the application's single timer service"""
    global _timer_service
    if _timer_service is None:
        settings = get_settings()
        _timer_service = TimerService(
            TimerGateway.from_settings(settings),
            QtTickScheduler(settings.tick_interval_ms),
        )
    return _timer_service


def reset_timer_service():
    """Tear down the timer service (logout or application exit)"""
    global _timer_service
    if _timer_service is not None:
        _timer_service.shutdown()
    _timer_service = None
