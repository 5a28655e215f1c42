"""
Task Timer Control - compact inline start/stop button for one task.
"""

import asyncio
import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QWidget

from worktimer.domain.errors import TimerError
from worktimer.services import EntryHistory, TimerService
from worktimer.ui.dialogs import start_with_feedback, stop_with_feedback
from worktimer.ui.presenters import ButtonMode, TimerControlState, present_task_control

logger = logging.getLogger(__name__)

RUNNING_COLOR = "#1B998B"


class TaskTimerControl(QWidget):
    """
    Inline control for task lists and cards.

    Shows the live clock while this task is being timed, otherwise the task's
    recorded total. Disabled while another task is being timed.
    """

    def __init__(self, timer_service: TimerService, task_id: str, task_title: Optional[str] = None,
                 case_title: Optional[str] = None, history: Optional[EntryHistory] = None, parent=None):
        super().__init__(parent)
        self.timer_service = timer_service
        self.task_id = str(task_id)
        self.task_title = task_title
        self.case_title = case_title
        self.history = history or EntryHistory(timer_service.gateway, self.task_id)

        self._setup_ui()
        self.timer_service.state_changed.connect(self.render)
        self.timer_service.loading_changed.connect(self.render)
        self.timer_service.entries_changed.connect(self._on_entries_changed)
        self.render()

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self.toggle_btn = QPushButton()
        self.toggle_btn.setFixedSize(28, 28)
        self.toggle_btn.setCursor(Qt.PointingHandCursor)
        self.toggle_btn.clicked.connect(self._on_toggle)
        layout.addWidget(self.toggle_btn)

        self.time_label = QLabel("00:00:00")
        font = QFont("Consolas")
        font.setPointSize(10)
        self.time_label.setFont(font)
        self.time_label.setMinimumWidth(60)
        layout.addWidget(self.time_label)

    def control_state(self) -> TimerControlState:
        return present_task_control(
            self.timer_service.state, self.timer_service.is_loading, self.task_id,
            historical_total=self.history.historical_total_seconds, compact=True,
        )

    def render(self, *_):
        view = self.control_state()
        self.toggle_btn.setText("⏸" if view.mode is ButtonMode.STOP else "▶")
        self.toggle_btn.setEnabled(view.enabled)
        self.toggle_btn.setToolTip(view.tooltip)
        self.time_label.setText(view.display_text)
        color = RUNNING_COLOR if view.is_active_task else "palette(text)"
        self.time_label.setStyleSheet(f"color: {color};")

    def load_history(self):
        """Fetch the recorded total. Must not be called while the loop is running."""
        try:
            asyncio.get_event_loop().run_until_complete(self.history.load())
        except TimerError as e:
            logger.warning("Could not load entries for task %s: %s", self.task_id, e)
        self.render()

    def _on_toggle(self):
        view = self.control_state()
        if not view.enabled:
            return
        if view.mode is ButtonMode.STOP:
            stop_with_feedback(self.timer_service, parent=self)
        else:
            start_with_feedback(self.timer_service, self.task_id, self.task_title, self.case_title, self)

    def _on_entries_changed(self, task_id: str):
        if task_id == self.task_id:
            # Deferred: the signal fires while a timer coroutine still runs
            QTimer.singleShot(0, self.load_history)
