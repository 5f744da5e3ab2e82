"""
Status pages shown by the main window.

Each page is a centered title, a description and a row of buttons; the main
window stacks them and switches between them as the conversion advances.
"""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from gui.utils.styling import StyleSheets


class StatusPage(QWidget):
    """Base page: a title, a description and a horizontal button row."""

    def __init__(self, title: str, description: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(32, 32, 32, 32)
        layout.setSpacing(12)
        layout.addStretch(1)

        self.title_label = QLabel(title)
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.title_label.setStyleSheet(StyleSheets.PAGE_TITLE)
        layout.addWidget(self.title_label)

        self.description_label = QLabel(description)
        self.description_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.description_label.setWordWrap(True)
        self.description_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(self.description_label)

        self.content_layout = QVBoxLayout()
        self.content_layout.setSpacing(8)
        layout.addLayout(self.content_layout)

        self.button_row = QHBoxLayout()
        self.button_row.setSpacing(24)
        self.button_row.addStretch(1)
        self._button_row_end = self.button_row.count()
        self.button_row.addStretch(1)
        layout.addLayout(self.button_row)

        layout.addStretch(1)

    def add_button(self, text: str, *, primary: bool = False) -> QPushButton:
        """Add a button to the centered button row."""
        button = QPushButton(text)
        if primary:
            button.setDefault(True)
            button.setStyleSheet(StyleSheets.PRIMARY_BUTTON)
        self.button_row.insertWidget(self._button_row_end, button)
        self._button_row_end += 1
        return button

    def set_description(self, text: str) -> None:
        self.description_label.setText(text)


class FolderSelectionPage(StatusPage):
    """
    Asks the user for a folder.

    Signals:
        folderSelected(str): Emitted with the chosen folder
        backRequested(): Emitted when the user goes back a step
    """

    folderSelected = Signal(str)
    backRequested = Signal()

    def __init__(
        self,
        description: str,
        button_label: str,
        *,
        allow_back: bool = False,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__("Select Folder", description, parent)
        self._start_dir = str(Path.home())

        self.select_button = self.add_button(button_label, primary=True)
        self.select_button.clicked.connect(self._on_select_clicked)

        self.back_button = self.add_button("Back")
        self.back_button.setVisible(allow_back)
        self.back_button.clicked.connect(self.backRequested)

    def set_start_dir(self, path: str) -> None:
        """Set the folder the dialog opens in."""
        if path:
            self._start_dir = path

    def _on_select_clicked(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, self.select_button.text(), self._start_dir)
        if folder:
            self._start_dir = folder
            self.folderSelected.emit(folder)


class ConfirmPage(StatusPage):
    """Summarizes the chosen folders and starts the conversion."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__("Start Conversion", "Click the button below to start the conversion", parent)

        self.folders_label = QLabel()
        self.folders_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.folders_label.setWordWrap(True)
        self.content_layout.addWidget(self.folders_label)

        self.back_button = self.add_button("Back")
        self.convert_button = self.add_button("Convert", primary=True)
        self.restart_button = self.add_button("Restart")

    def set_folders(self, input_root: str, output_root: str) -> None:
        self.folders_label.setText(f"From: {input_root}\nTo: {output_root}")


class ProgressPage(StatusPage):
    """Shows the file counter and progress bar while a batch runs."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__("Converting", "Please wait while the conversion is in progress", parent)
        self._total = 0

        self.count_label = QLabel()
        self.count_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.content_layout.addWidget(self.count_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setTextVisible(False)
        self.content_layout.addWidget(self.progress_bar)

        self.reset()

    def reset(self) -> None:
        """Show an indeterminate bar until the scan reports its total."""
        self._total = 0
        self.count_label.setVisible(False)
        self.progress_bar.setRange(0, 0)
        self.progress_bar.setValue(0)

    def set_total(self, total: int) -> None:
        self._total = total
        self.progress_bar.setRange(0, 1000)
        self.progress_bar.setValue(0)
        self.count_label.setVisible(total > 0)
        self.count_label.setText(f"0 / {total}")

    def set_fraction(self, fraction: float) -> None:
        fraction = max(0.0, min(1.0, fraction))
        self.progress_bar.setValue(round(fraction * 1000))
        self.count_label.setText(f"{round(fraction * self._total)} / {self._total}")

    @property
    def count_text(self) -> str:
        return self.count_label.text()


class ResultPage(StatusPage):
    """Terminal page for a finished or failed batch."""

    def __init__(self, title: str, description: str, parent: QWidget | None = None) -> None:
        super().__init__(title, description, parent)
        self.close_button = self.add_button("Close", primary=True)
        self.restart_button = self.add_button("Restart")
