"""
Main entry point for the Heic2JPG GUI application.
"""

import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from core.codec import initialize_codec
from core.config import APP_NAME, setup_qsettings
from core.config_manager import ConfigManager
from core.error_handler import init_logging, setup_error_handling
from core.errors import CodecInitError
from gui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> int:
    """Main application entry point."""
    app = QApplication(sys.argv)
    setup_qsettings()

    config_manager = ConfigManager()
    init_logging(config_manager.get("log_level"))
    setup_error_handling()

    # Nothing can be converted without the HEIF decoder
    try:
        codec_token = initialize_codec()
    except CodecInitError as e:
        logger.error(f"Codec initialization failed: {e.technical_message}")
        details = f"\n\n{e.technical_message}" if e.technical_message else ""
        QMessageBox.critical(None, APP_NAME, f"{e.user_message}{details}")
        return 1

    window = MainWindow(codec_token, config_manager)
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
