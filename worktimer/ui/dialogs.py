"""
Dialogs shared by the timer surfaces.
"""

import asyncio
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QTextEdit, QDialogButtonBox, QMessageBox, QWidget
)

from worktimer.domain.errors import TimerError
from worktimer.i18n import tr
from worktimer.services import TimerService
from worktimer.ui.presenters import describe_error

logger = logging.getLogger(__name__)


class StopTimerDialog(QDialog):
    """
    Confirmation step before a timer is stopped.

    Collects an optional description. Cancelling never touches the timer.
    """

    def __init__(self, task_title: str, elapsed_text: str, parent=None):
        super().__init__(parent)
        self.setWindowTitle(tr("stop_dialog.title"))
        self.setModal(True)
        self.setMinimumWidth(380)

        layout = QVBoxLayout(self)

        header = QLabel(f"{task_title}  ·  {elapsed_text}")
        header.setStyleSheet("font-size: 14px; font-weight: bold;")
        layout.addWidget(header)

        layout.addWidget(QLabel(tr("stop_dialog.prompt")))

        self.description_edit = QTextEdit()
        self.description_edit.setPlaceholderText(tr("stop_dialog.placeholder"))
        self.description_edit.setMaximumHeight(90)
        layout.addWidget(self.description_edit)

        buttons = QDialogButtonBox()
        self.confirm_btn = buttons.addButton(tr("stop_dialog.confirm"), QDialogButtonBox.AcceptRole)
        buttons.addButton(tr("stop_dialog.cancel"), QDialogButtonBox.RejectRole)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def description(self) -> Optional[str]:
        text = self.description_edit.toPlainText().strip()
        return text or None


def confirm_and_stop(timer_service: TimerService, parent: Optional[QWidget] = None) -> bool:
    """
    Ask for confirmation and stop the running timer.

    Returns True when the timer was stopped. Failures are shown to the user
    and leave the timer running so the stop can be retried.
    """
    state = timer_service.state
    if not state.is_running:
        return False

    dialog = StopTimerDialog(
        state.task_title or tr("timer.unknown_task"),
        timer_service.formatted_elapsed(),
        parent,
    )
    if dialog.exec() != QDialog.Accepted:
        return False
    return stop_with_feedback(timer_service, dialog.description(), parent)


def stop_with_feedback(timer_service: TimerService, description: Optional[str] = None,
                       parent: Optional[QWidget] = None) -> bool:
    """Stop the running timer from a UI action, showing any failure to the user"""
    loop = asyncio.get_event_loop()
    try:
        loop.run_until_complete(timer_service.stop(description))
    except TimerError as e:
        logger.warning("Stop failed: %s", e)
        QMessageBox.warning(parent, tr("error"), tr("error.stop_failed", error=describe_error(e)))
        return False
    return True


def start_with_feedback(timer_service: TimerService, task_id: str, task_title: Optional[str] = None,
                        case_title: Optional[str] = None, parent: Optional[QWidget] = None) -> bool:
    """Start a timer from a UI action, showing any failure to the user"""
    loop = asyncio.get_event_loop()
    try:
        loop.run_until_complete(timer_service.start(task_id, task_title, case_title))
    except TimerError as e:
        logger.warning("Start failed for task %s: %s", task_id, e)
        QMessageBox.warning(parent, tr("error"), tr("error.start_failed", error=describe_error(e)))
        return False
    return True
