"""
Presenters - what each timer surface shows, computed from TimerState.

Architecture Decision: Presentation logic without widgets
Widgets call these functions on every state change and copy the result onto
Qt controls. Keeping the rules here lets them be tested without a display.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from worktimer.domain.errors import ConflictError, NetworkError, TimerError
from worktimer.domain.models import TimerState
from worktimer.i18n import tr
from worktimer.utils import format_time


class ButtonMode(str, Enum):
    START = "start"
    STOP = "stop"


@dataclass(frozen=True)
class TimerControlState:
    """Render data for a per-task start/stop control"""
    mode: ButtonMode
    enabled: bool
    tooltip: str
    display_text: str
    is_active_task: bool
    running_elsewhere: Optional[str] = None  # title of the task being timed instead


def running_task_label(state: TimerState) -> str:
    """Title of the task being timed, or a placeholder when it is unknown"""
    return state.task_title or tr("timer.unknown_task")


def present_task_control(state: TimerState, is_loading: bool, task_id: str,
                         historical_total: int = 0, compact: bool = True) -> TimerControlState:
    """
    Compute the start/stop control for one task.

    The compact variant shows the task's total when it is not being timed,
    the detail variant shows a zeroed clock.
    """
    is_active = state.is_for_task(task_id)
    elsewhere = state.is_running and not is_active

    if is_active:
        display = format_time(state.elapsed_seconds)
    elif compact:
        display = format_time(historical_total)
    else:
        display = format_time(0)

    if elsewhere:
        title = running_task_label(state)
        tooltip = tr("timer.busy_other", title=title)
    elif is_active:
        title = None
        tooltip = tr("timer.stop_tooltip")
    else:
        title = None
        tooltip = tr("timer.start_tooltip")

    if is_loading:
        tooltip = tr("timer.loading")

    return TimerControlState(
        mode=ButtonMode.STOP if is_active else ButtonMode.START,
        enabled=not is_loading and not elsewhere,
        tooltip=tooltip,
        display_text=display,
        is_active_task=is_active,
        running_elsewhere=title,
    )


@dataclass(frozen=True)
class FloatingTimerState:
    """Render data for the global floating widget"""
    visible: bool
    time_text: str
    task_text: str
    case_text: str
    stop_enabled: bool


def present_floating(state: TimerState, is_loading: bool, enabled: bool = True) -> FloatingTimerState:
    if not state.is_running:
        return FloatingTimerState(False, format_time(0), "", "", False)
    return FloatingTimerState(
        visible=enabled,
        time_text=format_time(state.elapsed_seconds),
        task_text=running_task_label(state),
        case_text=state.case_title or "",
        stop_enabled=not is_loading,
    )


def describe_error(error: TimerError) -> str:
    """Actionable message for a failed timer command"""
    if isinstance(error, NetworkError):
        return tr("error.network")
    if isinstance(error, ConflictError):
        return tr("error.conflict")
    return error.message or str(error) or type(error).__name__
