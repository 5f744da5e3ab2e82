"""
Batch state management for Heic2JPG.

This module defines the states a conversion batch moves through and the
BatchState record the worker keeps while it runs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto


class ConversionState(Enum):
    """
    Enumeration of batch states.

    Idle -> Running -> {Completed | Failed} -> Idle
    """

    IDLE = auto()  # No batch running, ready to accept a job
    RUNNING = auto()  # Batch in progress
    COMPLETED = auto()  # Every candidate converted
    FAILED = auto()  # Stopped on the first failing candidate

    @property
    def is_terminal(self) -> bool:
        return self in (ConversionState.COMPLETED, ConversionState.FAILED)


@dataclass(frozen=True)
class BatchState:
    """
    Immutable snapshot of a batch.

    Each transition returns a new snapshot and raises RuntimeError when it
    would break the batch invariants: ``total`` is fixed once running,
    ``completed`` only grows and never exceeds ``total``, and a batch reaches
    exactly one terminal state.
    """

    state: ConversionState = ConversionState.IDLE
    total: int = 0
    completed: int = 0
    reason: str | None = None

    @classmethod
    def idle(cls) -> BatchState:
        return cls()

    def start(self, total: int) -> BatchState:
        if self.state is ConversionState.RUNNING:
            raise RuntimeError("Batch is already running")
        if total < 0:
            raise RuntimeError(f"Invalid total: {total}")
        return BatchState(state=ConversionState.RUNNING, total=total)

    def advance(self) -> BatchState:
        self._require_running("advance")
        if self.completed >= self.total:
            raise RuntimeError(f"Cannot advance past total ({self.total})")
        return replace(self, completed=self.completed + 1)

    def complete(self) -> BatchState:
        self._require_running("complete")
        if self.completed != self.total:
            raise RuntimeError(f"Cannot complete with {self.completed}/{self.total} files converted")
        return replace(self, state=ConversionState.COMPLETED)

    def fail(self, reason: str) -> BatchState:
        self._require_running("fail")
        return replace(self, state=ConversionState.FAILED, reason=reason)

    @property
    def fraction(self) -> float | None:
        """Fraction of files converted, or None when there is nothing to convert."""
        if self.total == 0:
            return None
        return self.completed / self.total

    def _require_running(self, action: str) -> None:
        if self.state is not ConversionState.RUNNING:
            raise RuntimeError(f"Cannot {action} a batch in state {self.state.name}")
