"""Open converted output in the platform file manager."""

import logging
import platform
import subprocess
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices

logger = logging.getLogger(__name__)

_FALLBACK_COMMANDS = {
    "windows": "explorer",
    "darwin": "open",
    "linux": "xdg-open",
}


def open_in_file_manager(path: Path) -> bool:
    """Open a folder in the OS-native file manager.

    Qt's QDesktopServices is tried first; the platform's own opener command
    is the fallback.

    Args:
        path: Existing directory to show.

    Returns:
        True if some opener accepted the folder, False otherwise.
    """
    if not path.is_dir():
        logger.warning(f"Cannot open non-directory path in file manager: {path}")
        return False

    abs_path = path.resolve()
    if QDesktopServices.openUrl(QUrl.fromLocalFile(str(abs_path))):
        logger.debug(f"Opened {abs_path} using QDesktopServices")
        return True

    command = _FALLBACK_COMMANDS.get(platform.system().lower())
    if command is None:
        logger.warning(f"No file manager fallback for platform {platform.system()}")
        return False

    try:
        result = subprocess.run([command, str(abs_path)], check=False, capture_output=True)
    except (subprocess.SubprocessError, FileNotFoundError) as e:
        logger.error(f"Platform-specific fallback failed for {abs_path}: {e}")
        return False

    # explorer.exe reports 1 even when it succeeds
    if result.returncode == 0 or command == "explorer":
        logger.debug(f"Opened {abs_path} using {command}")
        return True

    logger.warning(f"{command} failed with return code {result.returncode}")
    return False
