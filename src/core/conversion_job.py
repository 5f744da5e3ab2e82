"""
Value types describing a conversion batch.

A ConversionJob is what the consumer submits; FileCandidate and
ConversionOutcome are produced while the batch runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .errors import BaseAppError, ErrorCode, JobValidationError


@dataclass(frozen=True)
class ConversionJob:
    """
    One batch request: convert every HEIC file under ``input_root`` into
    ``output_root``.

    Instances are immutable; the worker owns the job once it is submitted.
    """

    input_root: Path
    output_root: Path

    def __post_init__(self) -> None:
        # Accept plain strings from the GUI layer
        object.__setattr__(self, "input_root", Path(self.input_root))
        object.__setattr__(self, "output_root", Path(self.output_root))

    def normalized(self) -> ConversionJob:
        """
        Return a copy with both roots expanded and made absolute.

        Returns:
            New ConversionJob with normalized paths
        """
        return ConversionJob(
            input_root=_normalize_path(self.input_root),
            output_root=_normalize_path(self.output_root),
        )

    def validate(self) -> None:
        """
        Check that both roots exist and are directories.

        Raises:
            JobValidationError: If either root is unusable
        """
        for field_name, label in (("input_root", "Input folder"), ("output_root", "Output folder")):
            path: Path = getattr(self, field_name)
            if not path.exists():
                raise JobValidationError(f"{label} does not exist: {path}", field=field_name)
            if not path.is_dir():
                raise JobValidationError(
                    f"{label} is not a directory: {path}", field=field_name, code=ErrorCode.NOT_A_DIRECTORY
                )


def _normalize_path(path: Path) -> Path:
    expanded = os.path.expanduser(os.path.expandvars(str(path)))
    return Path(expanded).resolve()


@dataclass(frozen=True)
class FileCandidate:
    """A discovered source file eligible for conversion."""

    path: Path

    @property
    def stem(self) -> str:
        return self.path.stem

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class ConversionOutcome:
    """
    Result of converting one candidate.

    Either ``Converted(output_path)`` or ``Failed(reason)``; use the
    ``converted`` and ``failed`` constructors rather than building one directly.
    """

    source: Path
    output_path: Path | None = None
    error: BaseAppError | None = None

    @classmethod
    def converted(cls, source: Path, output_path: Path) -> ConversionOutcome:
        return cls(source=source, output_path=output_path)

    @classmethod
    def failed(cls, source: Path, error: BaseAppError) -> ConversionOutcome:
        return cls(source=source, error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> str | None:
        """Human-readable failure reason, or None for a converted file."""
        return None if self.error is None else str(self.error)
