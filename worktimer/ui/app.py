"""
Timer Application - Main UI entry point.

Architecture Decision: Presentation Layer
This layer only handles UI logic. Timer rules live in the TimerService,
backend access in the TimerGateway.
"""

import asyncio
import logging
import sys
from typing import Dict, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QColor, QIcon, QPalette, QPixmap
from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from worktimer.i18n import is_rtl, set_language, tr
from worktimer.infra.config import get_settings
from worktimer.services import EntryHistory, get_timer_service, reset_timer_service
from worktimer.ui.floating_timer import FloatingTimerWidget
from worktimer.ui.recent_tasks import RecentTasksWindow
from worktimer.ui.task_detail import TaskDetailPanel

logger = logging.getLogger(__name__)


class TimerApp:
    """
    Main application class managing the tray icon, the floating timer and
    any open task panels.
    """

    def __init__(self):
        self.app = QApplication.instance() or QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)

        self.settings = get_settings()
        set_language(self.settings.preferences.language)
        if is_rtl():
            self.app.setLayoutDirection(Qt.RightToLeft)
        self._apply_theme(self.settings.preferences.theme)

        # Event loop for async operations; Qt slots drive it with run_until_complete
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)

        self.timer = get_timer_service()
        self.task_panels: Dict[str, TaskDetailPanel] = {}

        self.floating = FloatingTimerWidget(
            self.timer, enabled=self.settings.preferences.show_floating_timer
        )
        self.floating.open_task_requested.connect(self.open_task)

        self.recent = RecentTasksWindow(self.timer)
        self.recent.open_task_requested.connect(self.open_task)

        self.tray_icon = QSystemTrayIcon(self._create_icon(), self.app)
        self.tray_icon.setToolTip(tr("app.ready"))
        self.setup_menu()
        self.tray_icon.show()

        self._connect_signals()

        # Initialize on startup
        QTimer.singleShot(0, self._hydrate)

    def _create_icon(self) -> QIcon:
        pixmap = QPixmap(16, 16)
        pixmap.fill(QColor("#1B998B"))
        return QIcon(pixmap)

    def _apply_theme(self, theme: str):
        """Apply 'light', 'dark' or 'auto' (leave the platform palette alone)"""
        if theme == "auto":
            return
        self.app.setStyle("Fusion")
        if theme == "dark":
            palette = QPalette()
            palette.setColor(QPalette.Window, QColor(45, 45, 45))
            palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
            palette.setColor(QPalette.Base, QColor(30, 30, 30))
            palette.setColor(QPalette.Text, QColor(224, 224, 224))
            palette.setColor(QPalette.Button, QColor(60, 60, 60))
            palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
            palette.setColor(QPalette.Highlight, QColor(25, 118, 210))
            self.app.setPalette(palette)
        else:
            self.app.setPalette(self.app.style().standardPalette())

    def _connect_signals(self):
        """Connect service signals to UI handlers"""
        self.timer.tick.connect(self.update_tooltip)
        self.timer.state_changed.connect(self._on_state_changed)
        if self.settings.preferences.refresh_on_focus:
            self.app.applicationStateChanged.connect(self._on_application_state_changed)
        self.app.aboutToQuit.connect(self._shutdown)

    def setup_menu(self):
        """Setup the system tray context menu"""
        menu = QMenu()

        refresh_action = QAction(tr("tray.refresh"), self.app)
        refresh_action.triggered.connect(self._refresh)
        menu.addAction(refresh_action)

        recent_action = QAction(tr("tray.recent"), self.app)
        recent_action.triggered.connect(self.show_recent_tasks)
        menu.addAction(recent_action)

        floating_action = QAction(tr("tray.floating"), self.app)
        floating_action.setCheckable(True)
        floating_action.setChecked(self.settings.preferences.show_floating_timer)
        floating_action.toggled.connect(self.set_floating_enabled)
        menu.addAction(floating_action)

        menu.addSeparator()

        quit_action = QAction(tr("tray.quit"), self.app)
        quit_action.triggered.connect(self.app.quit)
        menu.addAction(quit_action)

        self.tray_icon.setContextMenu(menu)
        self._menu = menu

    def update_tooltip(self, text: str, seconds: int):
        """Update the tray icon tooltip with current time"""
        title = self.timer.state.task_title or tr("timer.unknown_task")
        self.tray_icon.setToolTip(f"{title}: {text}")

    def _on_state_changed(self, state):
        if not state.is_running:
            self.tray_icon.setToolTip(tr("app.ready"))

    def set_floating_enabled(self, enabled: bool):
        """Show or hide the floating timer and remember the choice"""
        self.floating.set_enabled_by_user(enabled)
        self.settings.preferences.show_floating_timer = enabled
        self.settings.save_preferences()

    def show_recent_tasks(self):
        self.recent.show()
        self.recent.raise_()
        self.recent.activateWindow()

    def _hydrate(self):
        self.loop.run_until_complete(self.timer.hydrate())

    def _refresh(self):
        # Same absorb-and-log policy as startup: a failed resync keeps the current state
        self.loop.run_until_complete(self.timer.hydrate())

    def _on_application_state_changed(self, state):
        if state == Qt.ApplicationActive and not self.loop.is_running():
            self._refresh()

    def open_task(self, task_id: str, task_title: Optional[str] = None,
                  case_title: Optional[str] = None) -> TaskDetailPanel:
        """Show the timer panel of a task, reusing an open one"""
        panel = self.task_panels.get(task_id)
        if panel is None:
            state = self.timer.state
            if task_title is None and state.is_for_task(task_id):
                task_title, case_title = state.task_title, state.case_title
            history = EntryHistory(self.timer.gateway, task_id)
            panel = TaskDetailPanel(self.timer, history, task_title, case_title)
            self.task_panels[task_id] = panel
            panel.load_history()
        self.recent.add_task(task_id, panel.task_title, panel.case_title)
        panel.show()
        panel.raise_()
        panel.activateWindow()
        return panel

    def _shutdown(self):
        """Clear the tick loop and close the HTTP client. The server-side timer keeps running."""
        gateway = self.timer.gateway
        reset_timer_service()
        self.loop.run_until_complete(gateway.aclose())
        self.loop.close()

    def run(self) -> int:
        """Run the application"""
        return self.app.exec()
