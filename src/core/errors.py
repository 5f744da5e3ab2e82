"""
Error taxonomy for the Heic2JPG converter.

This module provides the structured exception hierarchy used by the scanner,
the conversion engine and the worker lifecycle, plus a helper that maps
built-in exceptions onto it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Error type categories for consistent error handling."""

    FILE = "file"
    CONVERSION = "conversion"
    SYSTEM = "system"
    VALIDATION = "validation"


class ErrorCode(Enum):
    """Specific error codes for common scenarios."""

    # File-related errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    DISK_FULL = "DISK_FULL"
    SCAN_ACCESS = "SCAN_ACCESS"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"

    # Conversion errors
    DECODE_FAILED = "DECODE_FAILED"
    ENCODE_FAILED = "ENCODE_FAILED"

    # System errors
    CODEC_INIT_FAILED = "CODEC_INIT_FAILED"
    WORKER_BUSY = "WORKER_BUSY"
    OS_ERROR = "OS_ERROR"
    TIMEOUT = "TIMEOUT"
    MEMORY_ERROR = "MEMORY_ERROR"

    # Generic
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class BaseAppError(Exception):
    """
    Base application error with structured metadata.

    ``user_message`` is what the consumer shows verbatim; ``technical_message``
    keeps the underlying library error for the log file.
    """

    type: ErrorType
    code: ErrorCode
    user_message: str
    technical_message: str | None = None
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    retriable: bool = False
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return user-friendly error message."""
        return self.user_message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.type.value}, code={self.code.value}, message='{self.user_message}')"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "code": self.code.value,
            "user_message": self.user_message,
            "technical_message": self.technical_message,
            "severity": self.severity.value,
            "retriable": self.retriable,
            "context": self.context,
        }


class ScanAccessError(BaseAppError):
    """A filesystem entry could not be read during discovery.

    Never surfaced to the consumer; the scanner logs it and skips the entry.
    """

    def __init__(self, path: Path | str, technical_message: str | None = None):
        super().__init__(
            type=ErrorType.FILE,
            code=ErrorCode.SCAN_ACCESS,
            user_message=f"Could not read {path}",
            technical_message=technical_message,
            severity=ErrorSeverity.LOW,
            context={"path": str(path)},
        )

    @property
    def path(self) -> str:
        return self.context["path"]


class DecodeError(BaseAppError):
    """The source file is not a valid image in the expected format."""

    def __init__(self, source: Path | str, technical_message: str | None = None):
        super().__init__(
            type=ErrorType.CONVERSION,
            code=ErrorCode.DECODE_FAILED,
            user_message=f"Could not read image {Path(source).name}",
            technical_message=technical_message,
            severity=ErrorSeverity.HIGH,
            retriable=False,
            context={"source": str(source)},
        )

    @property
    def source(self) -> str:
        return self.context["source"]


class EncodeError(BaseAppError):
    """The converted image could not be written to its destination."""

    def __init__(
        self,
        destination: Path | str,
        technical_message: str | None = None,
        code: ErrorCode = ErrorCode.ENCODE_FAILED,
    ):
        super().__init__(
            type=ErrorType.CONVERSION,
            code=code,
            user_message=f"Could not write {destination}",
            technical_message=technical_message,
            severity=ErrorSeverity.HIGH,
            retriable=True,
            context={"destination": str(destination)},
        )

    @property
    def destination(self) -> str:
        return self.context["destination"]


class CodecInitError(BaseAppError):
    """Process-wide codec initialization failed."""

    def __init__(self, technical_message: str | None = None):
        super().__init__(
            type=ErrorType.SYSTEM,
            code=ErrorCode.CODEC_INIT_FAILED,
            user_message="The HEIC image codec could not be initialized",
            technical_message=technical_message,
            severity=ErrorSeverity.CRITICAL,
        )


class WorkerBusyError(BaseAppError):
    """A job was submitted while another batch is still running."""

    def __init__(self, user_message: str = "A conversion is already running"):
        super().__init__(
            type=ErrorType.SYSTEM,
            code=ErrorCode.WORKER_BUSY,
            user_message=user_message,
            severity=ErrorSeverity.LOW,
            retriable=True,
        )


class JobValidationError(BaseAppError):
    """A conversion job refers to folders that cannot be used."""

    def __init__(self, user_message: str, field: str | None = None, code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(
            type=ErrorType.VALIDATION,
            code=code,
            user_message=user_message,
            context={"field": field} if field else {},
        )

    @property
    def field(self) -> str | None:
        """Get the job field that caused the validation error."""
        return self.context.get("field")


class UnexpectedError(BaseAppError):
    """Fallback for exceptions outside the taxonomy."""

    def __init__(self, user_message: str, technical_message: str | None = None, code: ErrorCode = ErrorCode.UNKNOWN):
        super().__init__(
            type=ErrorType.SYSTEM,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=ErrorSeverity.HIGH,
        )


# Built-in exception -> (code, default message)
_EXCEPTION_MAPPING: dict[type[Exception], tuple[ErrorCode, str]] = {
    FileNotFoundError: (ErrorCode.FILE_NOT_FOUND, "File not found"),
    PermissionError: (ErrorCode.PERMISSION_DENIED, "Permission denied"),
    TimeoutError: (ErrorCode.TIMEOUT, "Operation timed out"),
    MemoryError: (ErrorCode.MEMORY_ERROR, "Insufficient memory"),
    OSError: (ErrorCode.OS_ERROR, "System error occurred"),
}


def map_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """
    Map a built-in exception to an application error.

    Args:
        exc: The exception to map
        context: Optional context information merged into the result

    Returns:
        BaseAppError instance with appropriate type and metadata
    """
    if isinstance(exc, BaseAppError):
        if context:
            exc.context.update(context)
        return exc

    technical = f"{type(exc).__name__}: {exc}"
    for exc_type, (code, default_message) in _EXCEPTION_MAPPING.items():
        if isinstance(exc, exc_type):
            error: BaseAppError = UnexpectedError(str(exc) or default_message, technical, code=code)
            break
    else:
        logger.warning(f"Unknown exception type: {technical}")
        error = UnexpectedError("An unexpected error occurred", technical)

    if context:
        error.context.update(context)
    return error
