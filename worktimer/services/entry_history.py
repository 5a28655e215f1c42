"""
Entry History - per-task time log merged with the live timer.

The backend's own total may or may not include the running entry, so the
historical total is recomputed from closed entries only. The live part comes
from the timer service's elapsed counter, never from a fabricated row.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from worktimer.domain.models import TimeEntry, TimerState
from worktimer.infra.gateway import TimerGateway
from worktimer.utils import format_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRow:
    """One rendered line of the time log"""
    entry: TimeEntry
    in_progress: bool
    duration_text: Optional[str]  # None while the entry is still running


class EntryHistory:
    """Time entries of a single task"""

    def __init__(self, gateway: TimerGateway, task_id: str):
        self.gateway = gateway
        self.task_id = str(task_id)
        self.entries: List[TimeEntry] = []
        self.store_total_seconds: int = 0
        self.loaded = False

    async def load(self) -> List[TimeEntry]:
        """Fetch the task's entries from the backend"""
        result = await self.gateway.fetch_task_entries(self.task_id)
        self.entries = list(result.entries)
        self.store_total_seconds = result.total_seconds
        self.loaded = True
        logger.debug("Loaded %d entries for task %s", len(self.entries), self.task_id)
        return self.entries

    @property
    def historical_total_seconds(self) -> int:
        """Sum of closed entries only"""
        return sum(e.duration_seconds for e in self.entries if not e.is_running)

    def display_total_seconds(self, state: TimerState) -> int:
        """Historical total plus the live elapsed time if this task is being timed"""
        live = state.elapsed_seconds if state.is_for_task(self.task_id) else 0
        return self.historical_total_seconds + live

    def rows(self, limit: Optional[int] = None) -> List[HistoryRow]:
        entries = self.entries if limit is None else self.entries[:limit]
        return [
            HistoryRow(
                entry=e,
                in_progress=e.is_running,
                duration_text=None if e.is_running else format_time(e.duration_seconds),
            )
            for e in entries
        ]

    def hidden_count(self, limit: Optional[int]) -> int:
        """Number of entries not shown by rows(limit)"""
        if limit is None:
            return 0
        return max(0, len(self.entries) - limit)

    async def update_description(self, entry_id: str, description: Optional[str]) -> TimeEntry:
        entry = await self.gateway.update_entry(entry_id, description=description)
        await self.load()
        return entry

    async def delete_entry(self, entry_id: str):
        await self.gateway.delete_entry(entry_id)
        await self.load()
