"""
Main window for the Heic2JPG application.

This module contains the MainWindow class: a stack of status pages driven by
the ConversionHandler, a menu with About and Quit, and a status bar showing
the batch state.
"""

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import QMainWindow, QStackedWidget

from core.codec import CodecToken
from core.config import APP_NAME
from core.config_manager import ConfigManager
from core.conversion_state import ConversionState
from core.threading import ConversionController
from gui.conversion_handler import ConversionHandler, Mode
from gui.dialogs.about_dialog import show_about_dialog
from gui.utils.fs import open_in_file_manager
from gui.widgets.notification_manager import NotificationManager
from gui.widgets.pages import ConfirmPage, FolderSelectionPage, ProgressPage, ResultPage
from gui.widgets.status_indicator import StatusIndicatorWidget

_MODE_STATUS = {
    Mode.PROGRESSING: ConversionState.RUNNING,
    Mode.FINISHED: ConversionState.COMPLETED,
    Mode.FAILED: ConversionState.FAILED,
}


class MainWindow(QMainWindow):
    """
    Main application window.

    Walks the user through picking an input folder, an output folder and
    starting the conversion, then shows progress and the result.
    """

    def __init__(self, codec_token: CodecToken, config_manager: ConfigManager | None = None) -> None:
        """
        Initialize the main window.

        Args:
            codec_token: Proof of codec initialization for the conversion engine
            config_manager: Settings store; a QSettings-backed one by default
        """
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._codec_token = codec_token
        self.config_manager = config_manager or ConfigManager()

        self.setWindowTitle("Convert Heic to JPG")
        self.setMinimumSize(480, 360)

        self.notification_manager = NotificationManager(self)
        controller = ConversionController(codec_token, jpeg_quality=self.config_manager.jpeg_quality(), parent=self)
        self.conversion_handler = ConversionHandler(controller, self.notification_manager, parent=self)
        self._close_pending = False

        self._setup_pages()
        self._setup_menu()
        self._setup_status_bar()
        self._connect_signals()

        self._load_window_geometry()
        self.on_mode_changed(self.conversion_handler.mode)

    def _setup_pages(self) -> None:
        self.input_page = FolderSelectionPage(
            "Select the folder where the Heic files can be found", "Select input directory"
        )
        self.input_page.set_start_dir(self.config_manager.get("last_input_dir"))

        self.output_page = FolderSelectionPage(
            "Select the folder where the JPG files are meant to be saved", "Select output directory", allow_back=True
        )
        self.output_page.set_start_dir(self.config_manager.get("last_output_dir"))

        self.confirm_page = ConfirmPage()
        self.progress_page = ProgressPage()
        self.finished_page = ResultPage("Conversion Complete", "The conversion was successful")
        self.open_output_button = self.finished_page.add_button("Open Folder")
        self.failed_page = ResultPage("Conversion Failed", "")

        self.stack = QStackedWidget()
        self._pages = {
            Mode.INPUT_SELECTION: self.input_page,
            Mode.OUTPUT_SELECTION: self.output_page,
            Mode.CONFIRM: self.confirm_page,
            Mode.PROGRESSING: self.progress_page,
            Mode.FINISHED: self.finished_page,
            Mode.FAILED: self.failed_page,
        }
        for page in self._pages.values():
            self.stack.addWidget(page)
        self.setCentralWidget(self.stack)

    def _setup_menu(self) -> None:
        menu = self.menuBar().addMenu("&Menu")

        self.about_action = QAction(f"&About {APP_NAME}", self)
        self.about_action.triggered.connect(self.on_about_triggered)
        menu.addAction(self.about_action)

        menu.addSeparator()

        self.quit_action = QAction("&Quit", self)
        self.quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        self.quit_action.triggered.connect(self.close)
        menu.addAction(self.quit_action)

    def _setup_status_bar(self) -> None:
        self.status_indicator = StatusIndicatorWidget()
        self.statusBar().addPermanentWidget(self.status_indicator)

    def _connect_signals(self) -> None:
        handler = self.conversion_handler
        handler.modeChanged.connect(self.on_mode_changed)
        handler.totalChanged.connect(self.progress_page.set_total)
        handler.progressChanged.connect(self.progress_page.set_fraction)
        handler.failureChanged.connect(self.failed_page.set_description)

        self.input_page.folderSelected.connect(self.on_input_selected)
        self.output_page.folderSelected.connect(self.on_output_selected)
        self.output_page.backRequested.connect(handler.deselect_input_folder)

        self.confirm_page.back_button.clicked.connect(handler.deselect_output_folder)
        self.confirm_page.convert_button.clicked.connect(handler.start_conversion)
        self.confirm_page.restart_button.clicked.connect(handler.start_over)

        for page in (self.finished_page, self.failed_page):
            page.close_button.clicked.connect(self.close)
            page.restart_button.clicked.connect(handler.start_over)
        self.open_output_button.clicked.connect(self.on_open_output_clicked)
        handler.controller.conversionFinished.connect(self._on_worker_finished)

    def on_input_selected(self, folder: str) -> None:
        self.config_manager.set("last_input_dir", folder)
        self.conversion_handler.select_input_folder(folder)

    def on_output_selected(self, folder: str) -> None:
        self.config_manager.set("last_output_dir", folder)
        self.conversion_handler.select_output_folder(folder)

    def on_mode_changed(self, mode: Mode) -> None:
        """Show the page for ``mode`` and update the status bar."""
        handler = self.conversion_handler
        if mode is Mode.CONFIRM and handler.input_folder and handler.output_folder:
            self.confirm_page.set_folders(str(handler.input_folder), str(handler.output_folder))
        elif mode is Mode.PROGRESSING and handler.file_count == 0:
            self.progress_page.reset()

        self.stack.setCurrentWidget(self._pages[mode])
        self.status_indicator.set_status(_MODE_STATUS.get(mode, ConversionState.IDLE))

    def on_open_output_clicked(self) -> None:
        folder = self.conversion_handler.output_folder
        if folder is None or not open_in_file_manager(folder):
            self.statusBar().showMessage("Could not open the output folder", 5000)

    def on_about_triggered(self) -> None:
        show_about_dialog(self, self._codec_token)

    def _load_window_geometry(self) -> None:
        width, height, maximized = self.config_manager.load_window_geometry()
        self.resize(width, height)
        if maximized:
            self.setWindowState(self.windowState() | Qt.WindowState.WindowMaximized)

    def _on_worker_finished(self) -> None:
        if self._close_pending:
            self._close_pending = False
            self.close()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist geometry and close, or defer closing until a running batch ends."""
        if self.conversion_handler.controller.is_running():
            # Batches cannot be cancelled; close once the worker has finished
            self._close_pending = True
            self.statusBar().showMessage("The window will close when the conversion finishes")
            event.ignore()
            return

        size = self.normalGeometry().size() if self.isMaximized() else self.size()
        self.config_manager.save_window_geometry(size.width(), size.height(), self.isMaximized())

        self.conversion_handler.shutdown()
        self.notification_manager.cleanup()
        event.accept()
