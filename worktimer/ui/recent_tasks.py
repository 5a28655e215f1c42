"""
Recent Tasks - list of recently used tasks, each with an inline timer control.
"""

from typing import Dict, List, Optional

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from worktimer.domain.models import TimerState
from worktimer.i18n import tr
from worktimer.services import TimerService
from worktimer.ui.task_timer import TaskTimerControl


class RecentTasksWindow(QWidget):
    """
    Most recently used tasks first.

    Tasks are added when their panel is opened and when a timer is found
    running on a task that is not listed yet.
    """

    # Signals
    open_task_requested = Signal(str)  # task_id

    def __init__(self, timer_service: TimerService, limit: int = 8, parent=None):
        super().__init__(parent)
        self.timer_service = timer_service
        self.limit = limit
        self.controls: Dict[str, TaskTimerControl] = {}
        self._rows: Dict[str, QWidget] = {}

        self.setWindowTitle(tr("recent.title"))
        self.setMinimumWidth(340)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        self.empty_label = QLabel(tr("recent.empty"))
        self.empty_label.setStyleSheet("color: gray;")
        layout.addWidget(self.empty_label)
        self.rows_layout = QVBoxLayout()
        layout.addLayout(self.rows_layout)
        layout.addStretch()

        self.timer_service.state_changed.connect(self._on_state_changed)

    @property
    def task_ids(self) -> List[str]:
        """Listed task ids, most recent first"""
        return [
            self.rows_layout.itemAt(i).widget().property("task_id")
            for i in range(self.rows_layout.count())
        ]

    def add_task(self, task_id: str, task_title: Optional[str] = None,
                 case_title: Optional[str] = None) -> TaskTimerControl:
        """List a task at the top, loading its recorded total the first time"""
        task_id = str(task_id)
        row = self._rows.get(task_id)
        if row is not None:
            self.rows_layout.removeWidget(row)
            self.rows_layout.insertWidget(0, row)
            return self.controls[task_id]

        row = QWidget()
        row.setProperty("task_id", task_id)
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)

        title_btn = QPushButton(task_title or tr("timer.unknown_task"))
        title_btn.setFlat(True)
        title_btn.setCursor(Qt.PointingHandCursor)
        title_btn.setStyleSheet("text-align: left; font-weight: bold;")
        if case_title:
            title_btn.setToolTip(case_title)
        title_btn.clicked.connect(lambda: self.open_task_requested.emit(task_id))
        row_layout.addWidget(title_btn, stretch=1)

        control = TaskTimerControl(self.timer_service, task_id, task_title, case_title, parent=row)
        row_layout.addWidget(control)

        self.rows_layout.insertWidget(0, row)
        self._rows[task_id] = row
        self.controls[task_id] = control
        self._trim()
        self.empty_label.hide()

        control.load_history()
        return control

    def _trim(self):
        while self.rows_layout.count() > self.limit:
            row = self.rows_layout.itemAt(self.rows_layout.count() - 1).widget()
            task_id = row.property("task_id")
            self.rows_layout.removeWidget(row)
            row.deleteLater()
            del self._rows[task_id]
            del self.controls[task_id]

    def _on_state_changed(self, state: TimerState):
        if state.is_running and state.task_id not in self._rows:
            # Deferred: loading the total needs the event loop to be free
            QTimer.singleShot(
                0, lambda: self.add_task(state.task_id, state.task_title, state.case_title)
            )
