"""
Centralized error handling and logging infrastructure for Heic2JPG.

This module provides a singleton ErrorHandler that normalizes exceptions into
the application error taxonomy, writes them to a rotating log file and
announces them to the UI through a Qt signal.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import threading
import traceback
from pathlib import Path
from typing import Any, ClassVar

from PySide6.QtCore import QObject, QStandardPaths, Signal

from .config import get_app_config_dir
from .errors import BaseAppError, map_exception

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ErrorCodeFilter(logging.Filter):
    """Make sure every record has an ``app_code`` for the file formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "app_code"):
            record.app_code = "-"
        return True


def get_logs_dir() -> Path:
    """
    Get the directory holding the rotating log files.

    Returns:
        Path inside the writable app data location
    """
    app_data_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    if app_data_location:
        return Path(app_data_location) / "logs"

    return get_app_config_dir() / "logs"


class ErrorHandler(QObject):
    """
    Centralized error handler with logging and user message translation.

    Singleton: every construction returns the same instance.
    """

    # Signal emitted when an error occurs (thread-safe)
    errorOccurred = Signal(object)  # BaseAppError

    _instance: ClassVar[ErrorHandler | None] = None
    _logger: ClassVar[logging.Logger | None] = None

    def __new__(cls) -> ErrorHandler:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return

        super().__init__()
        self._initialized = True
        self._original_excepthook = sys.excepthook
        self._original_threading_excepthook = threading.excepthook

        self._setup_logging()

    def capture(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Normalize an exception into a BaseAppError.

        Args:
            exception: The exception to capture
            context: Optional context information

        Returns:
            BaseAppError with a traceback in its context
        """
        app_error = map_exception(exception, context)

        if not app_error.technical_message:
            app_error.technical_message = f"{type(exception).__name__}: {exception}"

        if "traceback" not in app_error.context:
            tb_lines = traceback.format_exception(type(exception), exception, exception.__traceback__)
            app_error.context["traceback"] = "".join(tb_lines)

        return app_error

    def handle(self, exception: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
        """
        Capture, log and announce an exception.

        Args:
            exception: The exception to handle
            context: Optional context information

        Returns:
            BaseAppError for further processing
        """
        app_error = self.capture(exception, context)

        if self._logger:
            self._logger.error(
                f"[{app_error.code.value}] {app_error.user_message}",
                extra={"app_code": app_error.code.value},
                exc_info=exception,
            )

        self.errorOccurred.emit(app_error)
        return app_error

    def to_user_message(self, app_error: BaseAppError) -> str:
        """
        Generate the message shown to the user.

        Args:
            app_error: The error to convert

        Returns:
            User-friendly message string
        """
        message = app_error.user_message
        if app_error.retriable:
            message = f"{message.rstrip('.')}. You can try again."
        return message

    def _setup_logging(self) -> None:
        """Set up rotating file logging in the app data directory."""
        ErrorHandler._logger = logging.getLogger("heic2jpg.errors")
        ErrorHandler._logger.setLevel(logging.DEBUG)
        ErrorHandler._logger.propagate = False

        if ErrorHandler._logger.handlers:
            return

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | code=%(app_code)s | %(message)s",
            datefmt=LOG_DATE_FORMAT,
        )

        try:
            logs_dir = get_logs_dir()
            logs_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                logs_dir / "errors.log",
                maxBytes=5_242_880,  # 5MB
                backupCount=5,
                encoding="utf-8",
            )
        except OSError as e:
            logging.getLogger(__name__).warning(f"Failed to set up error log file: {e}")
        else:
            file_handler.setFormatter(formatter)
            file_handler.addFilter(_ErrorCodeFilter())
            ErrorHandler._logger.addHandler(file_handler)

        # Console handler for debug builds
        if __debug__:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            console_handler.addFilter(_ErrorCodeFilter())
            console_handler.setLevel(logging.WARNING)
            ErrorHandler._logger.addHandler(console_handler)

    def install_hooks(self) -> None:
        """Route unhandled exceptions from any thread through ``handle``."""

        def exception_hook(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: Any) -> None:
            if not isinstance(exc_value, Exception):
                self._original_excepthook(exc_type, exc_value, exc_traceback)
                return
            try:
                self.handle(exc_value, {"source": "sys.excepthook"})
            except Exception:
                self._original_excepthook(exc_type, exc_value, exc_traceback)

        def threading_exception_hook(args: threading.ExceptHookArgs) -> None:
            if not isinstance(args.exc_value, Exception):
                self._original_threading_excepthook(args)
                return
            try:
                self.handle(
                    args.exc_value,
                    {"source": "threading.excepthook", "thread": args.thread.name if args.thread else "unknown"},
                )
            except Exception:
                self._original_threading_excepthook(args)

        sys.excepthook = exception_hook
        threading.excepthook = threading_exception_hook

    def restore_hooks(self) -> None:
        """Restore original exception hooks."""
        sys.excepthook = self._original_excepthook
        threading.excepthook = self._original_threading_excepthook


def get_error_handler() -> ErrorHandler:
    """Get the singleton ErrorHandler instance."""
    return ErrorHandler()


def setup_error_handling() -> ErrorHandler:
    """
    Set up global error handling for the application.

    This should be called once during application startup.

    Returns:
        The configured ErrorHandler instance
    """
    handler = get_error_handler()
    handler.install_hooks()
    return handler


def init_logging(level: str = "INFO") -> None:
    """
    Initialize logging for the whole application.

    Args:
        level: Root log level name, e.g. "INFO" or "DEBUG"
    """
    get_error_handler()

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    # Pillow's plugin loader is very chatty at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)
