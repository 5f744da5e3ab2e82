"""
Desktop notifications for finished conversions.

The result page already tells an attentive user how a batch ended; the
notification is for users who switched away while it ran, so it is only
shown through the system tray while the window is in the background.
"""

import contextlib
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QObject
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication, QSystemTrayIcon, QWidget

from gui.utils.fs import open_in_file_manager


class NotificationManager(QObject):
    """
    Shows a tray notification when a batch ends.

    Each batch is announced at most once, keyed by its job id.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._parent_widget = parent
        self._logger = logging.getLogger(__name__)

        self._system_tray: QSystemTrayIcon | None = None
        self._notified_jobs: dict[str, str] = {}  # job_id -> status

        self._test_mode = "pytest" in sys.modules
        if not self._test_mode:
            self._init_system_tray()

    def _init_system_tray(self) -> None:
        if not QSystemTrayIcon.isSystemTrayAvailable():
            self._logger.debug("System tray not available")
            return

        self._system_tray = QSystemTrayIcon(self)
        app_instance = QApplication.instance()
        app_icon = app_instance.windowIcon() if isinstance(app_instance, QApplication) else QIcon()
        if not app_icon.isNull():
            self._system_tray.setIcon(app_icon)
        self._system_tray.setToolTip("Heic2JPG")
        self._system_tray.show()
        self._logger.debug("System tray initialized")

    def notify(self, status: str, title: str, message: str, job_id: str, output_path: str | None = None) -> bool:
        """
        Announce the end of a batch.

        Args:
            status: 'success' or 'error'
            title: Notification title
            message: Notification body
            job_id: Identifier of the batch, used for deduplication
            output_path: Folder opened when the notification is clicked

        Returns:
            True if a tray notification was shown
        """
        if job_id in self._notified_jobs:
            self._logger.debug(f"Job {job_id} already notified with outcome: {self._notified_jobs[job_id]}")
            return False
        self._notified_jobs[job_id] = status

        if self._test_mode:
            self._logger.info(f"TEST NOTIFICATION [{status}] {title}: {message} (job_id={job_id})")
            return False

        if not self._should_use_system_tray() or self._system_tray is None:
            return False

        icon = (
            QSystemTrayIcon.MessageIcon.Critical if status == "error" else QSystemTrayIcon.MessageIcon.Information
        )

        with contextlib.suppress(TypeError, RuntimeError):
            self._system_tray.messageClicked.disconnect()
        if output_path and Path(output_path).is_dir():
            self._system_tray.messageClicked.connect(lambda: open_in_file_manager(Path(output_path)))

        self._system_tray.showMessage(title, message, icon, 5000)
        return True

    def _should_use_system_tray(self) -> bool:
        if self._parent_widget is None:
            return True
        return self._parent_widget.isMinimized() or not self._parent_widget.isActiveWindow()

    def cleanup(self) -> None:
        if self._system_tray:
            self._system_tray.hide()
            self._system_tray = None
        self._notified_jobs.clear()
