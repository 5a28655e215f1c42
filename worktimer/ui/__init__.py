"""UI layer - PySide6 timer surfaces"""

from .app import TimerApp
from .dialogs import StopTimerDialog
from .floating_timer import FloatingTimerWidget
from .recent_tasks import RecentTasksWindow
from .task_detail import TaskDetailPanel
from .task_timer import TaskTimerControl

__all__ = [
    "TimerApp", "StopTimerDialog", "FloatingTimerWidget", "RecentTasksWindow", "TaskDetailPanel",
    "TaskTimerControl",
]
