"""
Floating Timer - always-on-top widget shown while a timer runs.

Architecture Decision: Simplicity first
Collapsed it is the running clock and a stop button. Expanded it also names
the task and case and offers the open-task action.
"""

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget
)

from worktimer.i18n import tr
from worktimer.services import TimerService
from worktimer.ui.dialogs import confirm_and_stop
from worktimer.ui.presenters import FloatingTimerState, present_floating


class FloatingTimerWidget(QWidget):
    """
    Global timer widget positioned at the bottom right of the screen.

    Visible only while a timer runs and the user has not disabled it.
    """

    # Signals
    open_task_requested = Signal(str)  # task_id

    def __init__(self, timer_service: TimerService, enabled: bool = True, parent=None):
        super().__init__(parent)
        self.timer_service = timer_service
        self.enabled_by_user = enabled
        self.expanded = False

        self.setWindowTitle(tr("app.name"))
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint |
            Qt.FramelessWindowHint |
            Qt.Tool
        )

        self._setup_ui()
        self.timer_service.state_changed.connect(self.render)
        self.timer_service.loading_changed.connect(self.render)
        self.render()

    def _setup_ui(self):
        self.setStyleSheet("""
            QWidget#floatingTimer {
                background-color: palette(window);
                border: 1px solid rgba(0, 0, 0, 0.15);
                border-radius: 12px;
            }
        """)
        self.setObjectName("floatingTimer")
        self.setAttribute(Qt.WA_StyledBackground, True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(6)

        # Collapsed row: pulse dot, clock, stop, expand toggle
        row = QHBoxLayout()
        self.dot = QLabel("●")
        self.dot.setStyleSheet("color: #1B998B; font-size: 12px;")
        row.addWidget(self.dot)

        self.time_label = QLabel("00:00:00")
        timer_font = QFont("Consolas")
        timer_font.setPointSize(12)
        timer_font.setBold(True)
        self.time_label.setFont(timer_font)
        row.addWidget(self.time_label, stretch=1)

        self.stop_btn = QPushButton("⏹")
        self.stop_btn.setFixedSize(26, 26)
        self.stop_btn.setCursor(Qt.PointingHandCursor)
        self.stop_btn.setToolTip(tr("timer.stop_tooltip"))
        self.stop_btn.setStyleSheet("color: #FF9800; font-weight: bold;")
        self.stop_btn.clicked.connect(self._on_stop_clicked)
        row.addWidget(self.stop_btn)

        self.expand_btn = QPushButton("▲")
        self.expand_btn.setFixedSize(26, 26)
        self.expand_btn.setCursor(Qt.PointingHandCursor)
        self.expand_btn.clicked.connect(self.toggle_expanded)
        row.addWidget(self.expand_btn)
        layout.addLayout(row)

        # Expanded details
        self.details = QWidget()
        details_layout = QVBoxLayout(self.details)
        details_layout.setContentsMargins(0, 0, 0, 0)

        self.task_label = QLabel()
        self.task_label.setStyleSheet("font-weight: bold;")
        self.task_label.setWordWrap(True)
        details_layout.addWidget(self.task_label)

        self.case_label = QLabel()
        self.case_label.setStyleSheet("color: gray;")
        details_layout.addWidget(self.case_label)

        actions = QHBoxLayout()
        self.open_btn = QPushButton(tr("floating.open_task"))
        self.open_btn.clicked.connect(self._on_open_task)
        actions.addWidget(self.open_btn)
        actions.addStretch()
        details_layout.addLayout(actions)

        layout.addWidget(self.details)
        self.details.setVisible(False)

        self.setMinimumWidth(220)

    def view_state(self) -> FloatingTimerState:
        return present_floating(
            self.timer_service.state, self.timer_service.is_loading, self.enabled_by_user
        )

    def render(self, *_):
        view = self.view_state()
        self.time_label.setText(view.time_text)
        self.task_label.setText(view.task_text)
        self.case_label.setText(view.case_text)
        self.case_label.setVisible(bool(view.case_text))
        self.stop_btn.setEnabled(view.stop_enabled)
        self.open_btn.setEnabled(self.timer_service.state.task_id is not None)

        if view.visible and not self.isVisible():
            self.show()
            self._position_bottom_right()
        elif not view.visible and self.isVisible():
            self.expanded = False
            self.details.setVisible(False)
            self.hide()

    def set_enabled_by_user(self, enabled: bool):
        """Show or hide the widget while a timer runs (tray preference)"""
        self.enabled_by_user = enabled
        self.render()

    def toggle_expanded(self):
        self.expanded = not self.expanded
        self.details.setVisible(self.expanded)
        self.expand_btn.setText("▼" if self.expanded else "▲")
        self.expand_btn.setToolTip(tr("floating.collapse") if self.expanded else tr("floating.expand"))
        self.adjustSize()
        self._position_bottom_right()

    def _on_open_task(self):
        task_id = self.timer_service.state.task_id
        if task_id:
            self.open_task_requested.emit(task_id)

    def _on_stop_clicked(self):
        confirm_and_stop(self.timer_service, self)

    def _position_bottom_right(self):
        """Position window at bottom right of screen"""
        screen = QApplication.primaryScreen()
        if screen:
            screen_geometry = screen.availableGeometry()
            self.adjustSize()
            window_geometry = self.frameGeometry()
            x = screen_geometry.right() - window_geometry.width() - 20
            y = screen_geometry.bottom() - window_geometry.height() - 20
            self.move(x, y)
