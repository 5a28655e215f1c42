"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
The backend is the source of truth for time entries. Pydantic validates what it
sends us so the rest of the client only ever handles well-formed records, and
frozen models keep the timer state immutable between transitions.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


def _whole_seconds(value):
    """The backend may report fractional seconds; the clock counts whole ones"""
    if isinstance(value, float):
        return math.floor(value)
    return value


class WireModel(BaseModel):
    """Base for records received from the backend; ids may arrive as numbers"""
    model_config = ConfigDict(coerce_numbers_to_str=True)


class CaseRef(WireModel):
    """Minimal case reference embedded in a task"""
    id: str
    title: str


class TaskRef(WireModel):
    """Minimal task reference embedded in a time entry"""
    id: str
    title: str
    case_id: Optional[str] = None
    case: Optional[CaseRef] = None


class UserRef(WireModel):
    id: str
    name: str


class TimeEntry(WireModel):
    """
    Represents a single time tracking session as recorded by the backend.

    A session is running while `ended_at` is None. The `duration_seconds`
    value is only final once the backend has closed the entry.
    """
    id: str
    task_id: str
    user_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_seconds: int = Field(default=0, ge=0)

    description: Optional[str] = None
    is_billable: bool = False
    hourly_rate: Optional[float] = None

    task: Optional[TaskRef] = None
    user: Optional[UserRef] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def _floor_duration(cls, value):
        return _whole_seconds(value)

    @property
    def is_running(self) -> bool:
        return self.ended_at is None

    @property
    def task_title(self) -> Optional[str]:
        return self.task.title if self.task else None

    @property
    def case_title(self) -> Optional[str]:
        if self.task and self.task.case:
            return self.task.case.title
        return None


class ActiveTimer(BaseModel):
    """The caller's running entry plus the elapsed time computed by the server"""
    entry: TimeEntry
    elapsed_seconds: int = Field(ge=0)

    @field_validator("elapsed_seconds", mode="before")
    @classmethod
    def _floor_elapsed(cls, value):
        return _whole_seconds(value)


class TaskEntries(BaseModel):
    """Historical entries of one task and the backend's own total"""
    entries: List[TimeEntry] = Field(default_factory=list)
    total_seconds: int = 0
    has_active_timer: bool = False


class TaskSummary(WireModel):
    task: TaskRef
    total_seconds: int = 0
    entries_count: int = 0


class TimeSummary(BaseModel):
    """Per-period totals for the current user"""
    period: str
    total_seconds: int = 0
    billable_seconds: int = 0
    entries_count: int = 0
    by_task: List[TaskSummary] = Field(default_factory=list)


class TimerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class TimerState(BaseModel):
    """
    The client's runtime projection of the running timer.

    Never persisted and never mutated in place: the timer service builds a new
    instance on every transition and every tick.
    """
    model_config = ConfigDict(frozen=True)

    phase: TimerPhase = TimerPhase.IDLE
    active_entry_id: Optional[str] = None

    # Denormalized display context
    task_id: Optional[str] = None
    task_title: Optional[str] = None
    case_title: Optional[str] = None

    elapsed_seconds: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_phase(self) -> "TimerState":
        if self.phase is TimerPhase.RUNNING and not self.active_entry_id:
            raise ValueError("a running timer needs an active entry id")
        if self.phase is TimerPhase.IDLE and self.active_entry_id:
            raise ValueError("an idle timer cannot have an active entry id")
        return self

    @classmethod
    def idle(cls) -> "TimerState":
        return cls()

    @property
    def is_running(self) -> bool:
        return self.phase is TimerPhase.RUNNING

    def is_for_task(self, task_id: Optional[str]) -> bool:
        """True when the timer is running on the given task"""
        return self.is_running and task_id is not None and self.task_id == str(task_id)


class UserPreferences(BaseModel):
    """
    User configuration and preferences.

    This allows users to customize behavior without touching code.
    """
    model_config = ConfigDict(from_attributes=True)

    # UI settings
    language: str = Field(default="auto", description="UI language: 'en', 'ar', or 'auto' (detect from system)")
    theme: str = Field(default="auto", description="Theme: 'light', 'dark', or 'auto' (follows system)")
    show_floating_timer: bool = Field(default=True, description="Show the floating widget while a timer runs")

    # Task detail panel
    history_preview_limit: int = Field(default=5, ge=1, description="Entries shown before '+N more'")

    # Reconciliation
    refresh_on_focus: bool = Field(default=True, description="Resync the timer when the app regains focus")
