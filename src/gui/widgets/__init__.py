"""
Reusable GUI widgets for the Heic2JPG application.
"""

from .notification_manager import NotificationManager
from .pages import ConfirmPage, FolderSelectionPage, ProgressPage, ResultPage, StatusPage
from .status_indicator import StatusIndicatorWidget

__all__ = [
    "ConfirmPage",
    "FolderSelectionPage",
    "NotificationManager",
    "ProgressPage",
    "ResultPage",
    "StatusIndicatorWidget",
    "StatusPage",
]
