"""
Conversion handling for the Heic2JPG GUI.

This module keeps the page flow of the main window (pick input, pick output,
confirm, progress, result) and reacts to the events of the conversion
controller. It is the only GUI code that talks to the core.
"""

import logging
import uuid
from enum import Enum, auto
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot

from core.conversion_job import ConversionJob
from core.conversion_state import ConversionState
from core.error_handler import get_error_handler
from core.errors import BaseAppError
from core.threading import ConversionController
from gui.widgets.notification_manager import NotificationManager


class Mode(Enum):
    """Pages of the main window."""

    INPUT_SELECTION = auto()
    OUTPUT_SELECTION = auto()
    CONFIRM = auto()
    PROGRESSING = auto()
    FINISHED = auto()
    FAILED = auto()


class ConversionHandler(QObject):
    """
    Drives the page flow and forwards batch events to the UI.

    Signals:
        modeChanged(object): The page to show, a Mode
        totalChanged(int): Number of files the running batch will convert
        progressChanged(float): Fraction of the running batch converted
        failureChanged(str): Reason shown on the failure page
    """

    modeChanged = Signal(object)
    totalChanged = Signal(int)
    progressChanged = Signal(float)
    failureChanged = Signal(str)

    def __init__(
        self,
        controller: ConversionController,
        notification_manager: NotificationManager | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._logger = logging.getLogger(__name__)
        self._controller = controller
        self._notifications = notification_manager

        self.input_folder: Path | None = None
        self.output_folder: Path | None = None
        self.mode = Mode.INPUT_SELECTION
        self.file_count = 0
        self.progress = 0.0
        self.failure: str | None = None
        self._job_id: str | None = None

        self._controller.conversionStarted.connect(self.on_conversion_started)
        self._controller.progressChanged.connect(self.on_progress_changed)
        self._controller.conversionCompleted.connect(self.on_conversion_completed)
        self._controller.conversionFailed.connect(self.on_conversion_failed)

    @property
    def controller(self) -> ConversionController:
        return self._controller

    def _set_mode(self, mode: Mode) -> None:
        self.mode = mode
        self._logger.debug(f"Showing page {mode.name}")
        self.modeChanged.emit(mode)

    def select_input_folder(self, path: str | Path) -> None:
        self.input_folder = Path(path)
        self._set_mode(Mode.OUTPUT_SELECTION)

    def deselect_input_folder(self) -> None:
        self.input_folder = None
        self._set_mode(Mode.INPUT_SELECTION)

    def select_output_folder(self, path: str | Path) -> None:
        self.output_folder = Path(path)
        self._set_mode(Mode.CONFIRM)

    def deselect_output_folder(self) -> None:
        self.output_folder = None
        self._set_mode(Mode.OUTPUT_SELECTION)

    def start_conversion(self) -> None:
        """Submit the selected folders as a new batch."""
        if self.input_folder is None or self.output_folder is None:
            self._fail("Please select both input and output folders")
            return

        job = ConversionJob(self.input_folder, self.output_folder).normalized()
        try:
            job.validate()
            self._controller.submit(job)
        except BaseAppError as e:
            self._logger.warning(f"Conversion not started: {e.user_message}")
            self._fail(get_error_handler().to_user_message(e))
            return

        self._job_id = str(uuid.uuid4())[:8]
        self.file_count = 0
        self.progress = 0.0
        self.failure = None
        self._logger.info(f"[{self._job_id}] Submitted {job.input_root} -> {job.output_root}")
        self._set_mode(Mode.PROGRESSING)

    def start_over(self) -> None:
        """Forget both folders and go back to the first page."""
        if self._controller.is_running():
            self._logger.warning("Cannot start over while a conversion is running")
            return
        self.input_folder = None
        self.output_folder = None
        self.file_count = 0
        self.progress = 0.0
        self.failure = None
        self._set_mode(Mode.INPUT_SELECTION)

    @Slot(int)
    def on_conversion_started(self, total: int) -> None:
        self.file_count = total
        self.totalChanged.emit(total)
        if self.mode is not Mode.PROGRESSING:
            self._set_mode(Mode.PROGRESSING)

    @Slot(float)
    def on_progress_changed(self, fraction: float) -> None:
        if self.mode is not Mode.PROGRESSING:
            return
        self.progress = fraction
        self.progressChanged.emit(fraction)

    @Slot()
    def on_conversion_completed(self) -> None:
        self._logger.info(f"[{self._job_id or 'unknown'}] Conversion completed: {self.file_count} files")
        self.progress = 1.0 if self.file_count else self.progress
        self._set_mode(Mode.FINISHED)
        self._notify("success", "Conversion Complete", f"Converted {self.file_count} files")

    @Slot(str)
    def on_conversion_failed(self, reason: str) -> None:
        self._logger.error(f"[{self._job_id or 'unknown'}] Conversion failed: {reason}")
        self._fail(reason)
        self._notify("error", "Conversion Failed", reason)

    def _fail(self, reason: str) -> None:
        self.failure = reason
        self.failureChanged.emit(reason)
        self._set_mode(Mode.FAILED)

    def _notify(self, status: str, title: str, message: str) -> None:
        if self._notifications is None or self._job_id is None:
            return
        output_path = str(self.output_folder) if self.output_folder else None
        self._notifications.notify(status, title, message, job_id=self._job_id, output_path=output_path)

    @property
    def batch_state(self) -> ConversionState:
        return self._controller.state.state

    def shutdown(self, timeout_ms: int = 2000) -> None:
        self._controller.shutdown(timeout_ms)
