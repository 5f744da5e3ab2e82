"""
Typed progress events and the reporter that emits them in order.

For a batch of N files the reporter produces ``ConversionStarted(N)``, one
``ProgressUpdate`` per converted file, and then exactly one terminal event:
``ConversionComplete`` or ``ConversionFailed``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .conversion_state import BatchState, ConversionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionStarted:
    total: int


@dataclass(frozen=True)
class ProgressUpdate:
    fraction: float
    completed: int
    total: int


@dataclass(frozen=True)
class ConversionComplete:
    pass


@dataclass(frozen=True)
class ConversionFailed:
    reason: str


ConversionEvent = ConversionStarted | ProgressUpdate | ConversionComplete | ConversionFailed
EventSink = Callable[[ConversionEvent], None]


class ProgressReporter:
    """
    Turns batch progress into an ordered event stream.

    The reporter owns the BatchState of one batch, so every call is checked
    against it: updates before ``started`` or after a terminal event raise
    RuntimeError instead of reaching the sink.
    """

    def __init__(self, sink: EventSink) -> None:
        self._sink = sink
        self._state = BatchState.idle()

    @property
    def state(self) -> BatchState:
        return self._state

    def started(self, total: int) -> None:
        if self._state.state is not ConversionState.IDLE:
            raise RuntimeError("A reporter can only report one batch")
        self._state = self._state.start(total)
        self._emit(ConversionStarted(total))

    def advance(self) -> ProgressUpdate:
        """Record one converted file and emit its progress fraction."""
        self._state = self._state.advance()
        event = ProgressUpdate(
            fraction=self._state.fraction,
            completed=self._state.completed,
            total=self._state.total,
        )
        self._emit(event)
        return event

    def complete(self) -> None:
        self._state = self._state.complete()
        self._emit(ConversionComplete())

    def failed(self, reason: str) -> None:
        self._state = self._state.fail(reason)
        self._emit(ConversionFailed(reason))

    def _emit(self, event: ConversionEvent) -> None:
        logger.debug(f"Emitting {event}")
        self._sink(event)
