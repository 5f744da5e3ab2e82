"""
Tests for the centralized error handler and logging setup.
"""

import logging
import sys
import threading
from unittest.mock import patch

from core.error_handler import (
    ErrorHandler,
    get_error_handler,
    get_logs_dir,
    init_logging,
    setup_error_handling,
)
from core.errors import EncodeError, ErrorCode, WorkerBusyError


class TestErrorHandler:
    """Test ErrorHandler behavior."""

    def test_singleton(self, qtbot):
        assert ErrorHandler() is ErrorHandler()
        assert get_error_handler() is ErrorHandler()

    def test_capture_maps_and_adds_traceback(self, qtbot):
        handler = get_error_handler()
        try:
            raise FileNotFoundError("missing.heic")
        except FileNotFoundError as e:
            app_error = handler.capture(e, {"stage": "scan"})

        assert app_error.code == ErrorCode.FILE_NOT_FOUND
        assert app_error.context["stage"] == "scan"
        assert "FileNotFoundError" in app_error.context["traceback"]

    def test_capture_keeps_app_errors(self, qtbot):
        handler = get_error_handler()
        error = WorkerBusyError()

        assert handler.capture(error) is error
        assert error.technical_message

    def test_handle_emits_signal(self, qtbot):
        handler = get_error_handler()

        with qtbot.waitSignal(handler.errorOccurred) as blocker:
            handler.handle(RuntimeError("boom"))

        assert blocker.args[0].code == ErrorCode.UNKNOWN

    def test_to_user_message_mentions_retry(self, qtbot):
        handler = get_error_handler()

        retriable = EncodeError("/out/a.jpg", "disk full", code=ErrorCode.DISK_FULL)
        assert handler.to_user_message(retriable) == "Could not write /out/a.jpg. You can try again."

        busy = WorkerBusyError()
        busy.retriable = False
        assert handler.to_user_message(busy) == "A conversion is already running"

    def test_error_logger_does_not_propagate(self, qtbot):
        get_error_handler()
        assert logging.getLogger("heic2jpg.errors").propagate is False

    def test_install_and_restore_hooks(self, qtbot):
        handler = setup_error_handling()
        try:
            assert sys.excepthook is not handler._original_excepthook
            assert threading.excepthook is not handler._original_threading_excepthook

            with qtbot.waitSignal(handler.errorOccurred) as blocker:
                sys.excepthook(ValueError, ValueError("bad"), None)
            assert blocker.args[0].context["source"] == "sys.excepthook"
        finally:
            handler.restore_hooks()

        assert sys.excepthook is handler._original_excepthook


class TestLoggingSetup:
    """Test log configuration helpers."""

    def test_logs_dir_name(self, qtbot):
        assert get_logs_dir().name == "logs"

    def test_init_logging_quiets_pillow(self, qtbot):
        with patch("core.error_handler.logging.basicConfig") as basic_config:
            init_logging("debug")

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG
        assert logging.getLogger("PIL").level == logging.INFO

    def test_init_logging_unknown_level(self, qtbot):
        with patch("core.error_handler.logging.basicConfig") as basic_config:
            init_logging("chatty")

        assert basic_config.call_args.kwargs["level"] == logging.INFO
