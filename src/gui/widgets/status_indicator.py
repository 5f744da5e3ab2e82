"""
Status indicator widget for the main window's status bar.
"""

from PySide6.QtWidgets import QHBoxLayout, QLabel, QWidget

from core.conversion_state import ConversionState
from gui.utils.styling import apply_status_dot_style

_DESCRIPTIONS = {
    ConversionState.IDLE: ("Idle", "Ready to convert HEIC files"),
    ConversionState.RUNNING: ("Running", "Conversion in progress"),
    ConversionState.COMPLETED: ("Completed", "Conversion completed successfully"),
    ConversionState.FAILED: ("Failed", "Conversion stopped on an error"),
}


class StatusIndicatorWidget(QWidget):
    """
    Widget for displaying the current batch state.

    Shows a colored dot and status text with accessibility support.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._current_state = ConversionState.IDLE

        self.setObjectName("statusIndicator")
        self.setAccessibleName("Conversion status")

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self.status_dot = QLabel()
        self.status_dot.setFixedSize(12, 12)
        self.status_dot.setAccessibleName("Status indicator dot")
        layout.addWidget(self.status_dot)

        self.status_text = QLabel()
        self.status_text.setAccessibleName("Status text")
        layout.addWidget(self.status_text)

        self.set_status(ConversionState.IDLE)

    def set_status(self, state: ConversionState) -> None:
        """
        Set the current status state.

        Args:
            state: The new batch state
        """
        self._current_state = state
        display_name, description = _DESCRIPTIONS[state]

        apply_status_dot_style(self.status_dot, state.name)
        self.status_text.setText(display_name)
        self.status_dot.setAccessibleDescription(f"Status: {display_name}")
        self.status_text.setAccessibleDescription(description)
        self.setToolTip(f"{display_name}: {description}")

    def get_status(self) -> ConversionState:
        return self._current_state
