"""
Configuration constants and defaults for Heic2JPG.

This module defines the fixed source/target format pair, the application
identifiers used by QSettings, and the default values of every persisted
setting.
"""

from pathlib import Path
from typing import Any

from PySide6.QtCore import QCoreApplication, QStandardPaths

# Application identifiers for QSettings
APP_ORGANIZATION = "Heic2JPG"
APP_NAME = "Heic2JPG"
APP_VERSION = "0.3.0"

# Fixed conversion pair
SOURCE_EXTENSION = "heic"
TARGET_EXTENSION = "jpg"
TARGET_FORMAT = "JPEG"

DEFAULT_JPEG_QUALITY = 90
MIN_JPEG_QUALITY = 1
MAX_JPEG_QUALITY = 95

# Default configuration with all supported keys and JSON-serializable types
DEFAULT_CONFIG: dict[str, Any] = {
    # Conversion settings
    "jpeg_quality": DEFAULT_JPEG_QUALITY,
    # Folder pickers remember where they were last pointed
    "last_input_dir": "",
    "last_output_dir": "",
    # Debug settings
    "log_level": "INFO",  # Options: "DEBUG", "INFO", "WARNING", "ERROR"
    # Window geometry
    "window/width": 600,
    "window/height": 420,
    "window/maximized": False,
}


def get_app_config_dir() -> Path:
    """
    Get the application configuration directory using QStandardPaths.

    Returns:
        Path to the writable configuration directory for this application
    """
    config_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.ConfigLocation)
    return Path(config_location) / APP_ORGANIZATION / APP_NAME


def get_default_folder() -> str:
    """
    Get the folder the pickers open in when nothing was selected before.

    Returns:
        The user's Pictures directory, or the home directory as fallback
    """
    pictures_dir = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.PicturesLocation)
    if pictures_dir and Path(pictures_dir).exists():
        return pictures_dir
    return str(Path.home())


def setup_qsettings() -> None:
    """
    Configure QSettings with application identifiers.

    This should be called early in application startup to ensure
    QSettings uses the correct organization and application names.
    """
    QCoreApplication.setOrganizationName(APP_ORGANIZATION)
    QCoreApplication.setApplicationName(APP_NAME)
    QCoreApplication.setApplicationVersion(APP_VERSION)
