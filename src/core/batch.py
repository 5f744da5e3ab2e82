"""
Synchronous batch driver: scan, convert each candidate, report.

This is the algorithm the background worker runs. It is kept free of Qt so
it can be driven directly with a stub engine and a list as the event sink.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .conversion_job import ConversionJob, ConversionOutcome, FileCandidate
from .conversion_state import BatchState, ConversionState
from .errors import map_exception
from .reporter import EventSink, ProgressReporter
from .scanner import scan_for_candidates

logger = logging.getLogger(__name__)

Scanner = Callable[[Path], list[FileCandidate]]


class Engine(Protocol):
    def destination_for(self, source: Path, output_root: Path) -> Path: ...

    def convert_candidate(self, candidate: FileCandidate, output_root: Path) -> ConversionOutcome: ...


def run_batch(
    job: ConversionJob,
    engine: Engine,
    sink: EventSink,
    *,
    scan: Scanner = scan_for_candidates,
) -> BatchState:
    """
    Convert every candidate of ``job`` in scan order.

    Stops at the first failed candidate; files converted before it stay in
    the output folder. Exactly one terminal event reaches ``sink``, even if
    scanning or the engine raises something unexpected.

    Args:
        job: The batch to run
        engine: Converts one candidate at a time
        sink: Receives the ordered conversion events
        scan: Candidate discovery, replaceable in tests

    Returns:
        The terminal BatchState (Completed or Failed)
    """
    reporter = ProgressReporter(sink)
    logger.info(f"Converting folder {job.input_root} to {job.output_root}")

    try:
        candidates = scan(job.input_root)
        reporter.started(len(candidates))

        written: dict[Path, Path] = {}
        for index, candidate in enumerate(candidates, start=1):
            logger.info(f"Converting file {index}/{len(candidates)}: {candidate.path}")
            _warn_on_collision(engine, candidate, job.output_root, written)

            outcome = engine.convert_candidate(candidate, job.output_root)
            if not outcome.succeeded:
                logger.error(f"Batch stopped at {candidate.path}: {outcome.reason}")
                reporter.failed(outcome.reason or "Conversion failed")
                return reporter.state

            reporter.advance()

        reporter.complete()
        logger.info(f"Conversion complete: {len(candidates)} files written to {job.output_root}")
    except Exception as e:
        if reporter.state.state.is_terminal:
            raise
        app_error = map_exception(e, {"input_root": str(job.input_root)})
        logger.exception(f"Unexpected error during batch: {app_error.technical_message}")
        if reporter.state.state is ConversionState.IDLE:
            reporter.started(0)
        reporter.failed(app_error.user_message)

    return reporter.state


def _warn_on_collision(engine: Engine, candidate: FileCandidate, output_root: Path, written: dict[Path, Path]) -> None:
    # Later files with the same stem overwrite earlier ones; keep that visible in the log
    destination = engine.destination_for(candidate.path, output_root)
    previous = written.get(destination)
    if previous is not None:
        logger.warning(f"{candidate.path} overwrites {destination} written from {previous}")
    written[destination] = candidate.path
