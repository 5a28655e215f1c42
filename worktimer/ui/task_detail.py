"""
Task Detail Panel - clock, total and time log for one task.
"""

import asyncio
import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QListWidget, QListWidgetItem, QPushButton, QVBoxLayout, QWidget
)

from worktimer.domain.errors import TimerError
from worktimer.i18n import tr
from worktimer.infra.config import get_settings
from worktimer.services import EntryHistory, HistoryRow, TimerService
from worktimer.ui.dialogs import confirm_and_stop, start_with_feedback
from worktimer.ui.presenters import (
    ButtonMode, TimerControlState, describe_error, present_task_control
)
from worktimer.utils import format_time

logger = logging.getLogger(__name__)


class TaskDetailPanel(QWidget):
    """
    Timer section of a task page.

    The total combines the recorded history with the live clock when this
    task is the one being timed. Running entries in the log are marked as in
    progress instead of showing a duration.
    """

    def __init__(self, timer_service: TimerService, history: EntryHistory,
                 task_title: Optional[str] = None, case_title: Optional[str] = None,
                 preview_limit: Optional[int] = None, parent=None):
        super().__init__(parent)
        self.timer_service = timer_service
        self.history = history
        self.task_id = history.task_id
        self.task_title = task_title
        self.case_title = case_title
        self.preview_limit = preview_limit or get_settings().preferences.history_preview_limit
        self.loop = asyncio.get_event_loop()

        self.setWindowTitle(task_title or tr("app.name"))
        self._setup_ui()

        self.timer_service.state_changed.connect(self.render)
        self.timer_service.loading_changed.connect(self.render)
        self.timer_service.entries_changed.connect(self._on_entries_changed)

        self.render()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)

        # Clock and toggle
        main_row = QHBoxLayout()
        main_row.addStretch()
        self.time_label = QLabel("00:00:00")
        font = QFont("Consolas")
        font.setPointSize(24)
        font.setBold(True)
        self.time_label.setFont(font)
        main_row.addWidget(self.time_label)

        self.toggle_btn = QPushButton("▶")
        self.toggle_btn.setFixedSize(48, 48)
        self.toggle_btn.setCursor(Qt.PointingHandCursor)
        self.toggle_btn.clicked.connect(self._on_toggle)
        main_row.addWidget(self.toggle_btn)
        main_row.addStretch()
        layout.addLayout(main_row)

        self.total_label = QLabel()
        self.total_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.total_label)

        self.elsewhere_label = QLabel()
        self.elsewhere_label.setAlignment(Qt.AlignCenter)
        self.elsewhere_label.setStyleSheet("color: #FF9800;")
        layout.addWidget(self.elsewhere_label)

        # Time log
        header = QLabel(tr("history.title"))
        header.setStyleSheet("font-weight: bold; margin-top: 12px;")
        layout.addWidget(header)

        self.entries_list = QListWidget()
        layout.addWidget(self.entries_list, stretch=1)

        self.more_label = QLabel()
        self.more_label.setStyleSheet("color: gray;")
        layout.addWidget(self.more_label)

        self.setMinimumWidth(360)

    def control_state(self) -> TimerControlState:
        return present_task_control(
            self.timer_service.state, self.timer_service.is_loading, self.task_id, compact=False
        )

    def load_history(self):
        """Fetch the time log and render it"""
        try:
            self.loop.run_until_complete(self.history.load())
        except TimerError as e:
            logger.warning("Could not load entries for task %s: %s", self.task_id, e)
            self.entries_list.clear()
            self.entries_list.addItem(tr("history.load_failed", error=describe_error(e)))
            return
        self._render_history()
        self.render()

    def render(self, *_):
        view = self.control_state()
        state = self.timer_service.state

        self.time_label.setText(view.display_text)
        self.time_label.setStyleSheet("color: #1B998B;" if view.is_active_task else "")
        self.toggle_btn.setText("⏸" if view.mode is ButtonMode.STOP else "▶")
        self.toggle_btn.setEnabled(view.enabled)
        self.toggle_btn.setToolTip(view.tooltip)

        total = self.history.display_total_seconds(state)
        self.total_label.setText(tr("timer.total", time=format_time(total)))

        if view.running_elsewhere:
            self.elsewhere_label.setText(tr("timer.running_on", title=view.running_elsewhere))
            self.elsewhere_label.show()
        else:
            self.elsewhere_label.hide()

    def _render_history(self):
        self.entries_list.clear()
        rows = self.history.rows(self.preview_limit)
        if not rows:
            self.entries_list.addItem(tr("history.empty"))
        for row in rows:
            self.entries_list.addItem(self._make_item(row))

        hidden = self.history.hidden_count(self.preview_limit)
        self.more_label.setText(tr("history.more", count=hidden) if hidden else "")
        self.more_label.setVisible(bool(hidden))

    @staticmethod
    def _make_item(row: HistoryRow) -> QListWidgetItem:
        entry = row.entry
        who = entry.user.name if entry.user else ""
        started = entry.started_at.astimezone().strftime("%Y-%m-%d %H:%M")
        duration = tr("history.in_progress") if row.in_progress else row.duration_text
        text = f"{duration}   {started}   {who}".rstrip()
        item = QListWidgetItem(text)
        if entry.description:
            item.setToolTip(entry.description)
        if row.in_progress:
            font = item.font()
            font.setItalic(True)
            item.setFont(font)
        return item

    def _on_toggle(self):
        view = self.control_state()
        if not view.enabled:
            return
        if view.mode is ButtonMode.STOP:
            confirm_and_stop(self.timer_service, self)
        else:
            start_with_feedback(self.timer_service, self.task_id, self.task_title, self.case_title, self)

    def _on_entries_changed(self, task_id: str):
        if task_id == self.task_id:
            # Deferred: the signal fires while a timer coroutine still runs
            QTimer.singleShot(0, self.load_history)
