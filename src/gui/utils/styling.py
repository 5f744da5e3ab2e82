"""
Shared styling for the Heic2JPG window.

Colors are picked for WCAG AA contrast on the default light palette.
"""

from PySide6.QtWidgets import QWidget


class AccessiblePalette:
    """Centralized color palette."""

    # Status indicator colors
    STATUS_IDLE_COLOR = "#6c757d"  # Neutral gray
    STATUS_RUNNING_COLOR = "#fd7e14"  # Orange
    STATUS_COMPLETED_COLOR = "#198754"  # Green
    STATUS_FAILED_COLOR = "#dc3545"  # Red

    BORDER_DEFAULT = "#dee2e6"
    ACCENT = "#0d6efd"
    ACCENT_HOVER = "#0b5ed7"
    TEXT_ON_ACCENT = "#ffffff"
    TEXT_SECONDARY = "#495057"


class StyleSheets:
    """Reusable stylesheet definitions using the accessible palette."""

    PAGE_TITLE = "QLabel { font-size: 20px; font-weight: bold; }"

    PRIMARY_BUTTON = f"""
        QPushButton {{
            background-color: {AccessiblePalette.ACCENT};
            color: {AccessiblePalette.TEXT_ON_ACCENT};
            border: none;
            border-radius: 14px;
            padding: 6px 18px;
        }}
        QPushButton:hover {{
            background-color: {AccessiblePalette.ACCENT_HOVER};
        }}
    """


def get_status_indicator_color(status_state: str) -> str:
    """
    Get color for status indicator based on state.

    Args:
        status_state: ConversionState name (IDLE, RUNNING, COMPLETED, FAILED)

    Returns:
        Color hex string
    """
    status_colors = {
        "IDLE": AccessiblePalette.STATUS_IDLE_COLOR,
        "RUNNING": AccessiblePalette.STATUS_RUNNING_COLOR,
        "COMPLETED": AccessiblePalette.STATUS_COMPLETED_COLOR,
        "FAILED": AccessiblePalette.STATUS_FAILED_COLOR,
    }
    return status_colors.get(status_state, AccessiblePalette.STATUS_IDLE_COLOR)


def apply_status_dot_style(widget: QWidget, status_state: str) -> None:
    """Paint a small round status dot in the color of ``status_state``."""
    widget.setStyleSheet(
        f"""
        QLabel {{
            border-radius: 6px;
            background-color: {get_status_indicator_color(status_state)};
            border: 1px solid {AccessiblePalette.BORDER_DEFAULT};
        }}
    """
    )
