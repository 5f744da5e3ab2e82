"""
Threading system for non-blocking batch conversion.

This module provides a QThread-based worker that runs one batch off the UI
thread, and a controller that accepts one batch at a time and forwards the
worker's events to the UI over queued signal connections.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from .batch import run_batch
from .codec import CodecToken, initialize_codec
from .conversion_job import ConversionJob
from .conversion_state import BatchState, ConversionState
from .engine import ConversionEngine
from .errors import WorkerBusyError
from .reporter import ConversionComplete, ConversionEvent, ConversionFailed, ConversionStarted, ProgressUpdate

logger = logging.getLogger(__name__)


class ConversionWorker(QThread):
    """
    QThread-based worker that runs exactly one batch.

    All scanning and codec I/O happens inside ``run``. Events are re-emitted
    as signals in the order the batch produces them; Qt queues them for
    receivers living on the UI thread.

    Signals:
        conversionStarted(int): Number of files found by the scan
        progressChanged(float): Fraction of files converted, in (0, 1]
        conversionCompleted(): Every file was converted
        conversionFailed(str): The batch stopped; human-readable reason
    """

    conversionStarted = Signal(int)  # total
    progressChanged = Signal(float)  # fraction
    conversionCompleted = Signal()  # no args
    conversionFailed = Signal(str)  # reason

    def __init__(self, job: ConversionJob, engine: ConversionEngine, *, parent: QObject | None = None) -> None:
        """
        Initialize the conversion worker.

        Args:
            job: The batch to run
            engine: Engine used for every file of the batch
            parent: Parent QObject for lifetime management
        """
        super().__init__(parent)

        self.job = job
        self._engine = engine
        self._state = BatchState.idle()

        self.setObjectName("ConversionWorker")

    @property
    def state(self) -> BatchState:
        """Terminal state of the batch once ``run`` has returned."""
        return self._state

    def _dispatch(self, event: ConversionEvent) -> None:
        """Translate a batch event into the matching signal."""
        if isinstance(event, ConversionStarted):
            self.conversionStarted.emit(event.total)
        elif isinstance(event, ProgressUpdate):
            self.progressChanged.emit(event.fraction)
        elif isinstance(event, ConversionComplete):
            self.conversionCompleted.emit()
        elif isinstance(event, ConversionFailed):
            self.conversionFailed.emit(event.reason)

    def run(self) -> None:
        """
        Main worker thread execution.

        run_batch guarantees exactly one terminal event, so this method only
        records the final state.
        """
        self._state = run_batch(self.job, self._engine, self._dispatch)
        logger.info(f"Batch finished in state {self._state.state.name}")


class ConversionController(QObject):
    """
    Single-job actor owning the batch lifecycle.

    State machine: Idle -> Running -> {Completed | Failed} -> Idle. A new job
    is accepted in any state except Running; submitting while Running raises
    WorkerBusyError. There is no cancellation: a batch runs to completion or
    to its first failure.
    """

    # Signals to be emitted to the UI
    conversionStarted = Signal(int)
    progressChanged = Signal(float)
    conversionCompleted = Signal()
    conversionFailed = Signal(str)
    conversionFinished = Signal()  # Emitted after worker cleanup

    def __init__(
        self,
        codec_token: CodecToken | None = None,
        *,
        jpeg_quality: int | None = None,
        parent: QObject | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            codec_token: Proof of codec initialization; initialize_codec() is
                called when omitted, so a CodecInitError leaves no controller
            jpeg_quality: Override for the engine's JPEG quality
            parent: Parent QObject for lifetime management
        """
        super().__init__(parent)
        token = codec_token if codec_token is not None else initialize_codec()
        self._engine = (
            ConversionEngine(token) if jpeg_quality is None else ConversionEngine(token, jpeg_quality=jpeg_quality)
        )
        self.current_worker: ConversionWorker | None = None
        self._state = BatchState.idle()
        self._cleanup_in_progress = False
        self.setObjectName("ConversionController")
        logger.debug("ConversionController initialized.")

    @property
    def state(self) -> BatchState:
        """Read-only snapshot of the current batch."""
        return self._state

    @property
    def engine(self) -> ConversionEngine:
        return self._engine

    def is_running(self) -> bool:
        """Check if a batch is currently running."""
        return self._state.state is ConversionState.RUNNING

    @Slot(str, str)
    def convert_folder(self, input_root: str | Path, output_root: str | Path) -> ConversionJob:
        """
        Submit a batch converting ``input_root`` into ``output_root``.

        Returns:
            The submitted job

        Raises:
            WorkerBusyError: If a batch is already running
        """
        return self.submit(ConversionJob(Path(input_root), Path(output_root)))

    def submit(self, job: ConversionJob) -> ConversionJob:
        """
        Start a new worker for ``job``.

        Args:
            job: The batch to run

        Returns:
            The submitted job

        Raises:
            WorkerBusyError: If a batch is already running
        """
        if self.is_running():
            logger.warning("Rejected job: another conversion is already running")
            raise WorkerBusyError()

        self._state = BatchState.idle()
        worker = ConversionWorker(job, self._engine, parent=self)
        worker.setObjectName(f"ConversionWorker-{job.input_root.name or job.input_root}")

        # Our slots track state; the public signals are chained behind them so
        # the UI never sees an event before the controller has recorded it
        worker.conversionStarted.connect(self._on_started, Qt.ConnectionType.QueuedConnection)
        worker.progressChanged.connect(self._on_progress, Qt.ConnectionType.QueuedConnection)
        worker.conversionCompleted.connect(self._on_completed, Qt.ConnectionType.QueuedConnection)
        worker.conversionFailed.connect(self._on_failed, Qt.ConnectionType.QueuedConnection)
        worker.finished.connect(self._cleanup_worker, Qt.ConnectionType.QueuedConnection)

        self.current_worker = worker
        # Running from submission on, so a second submit is rejected even
        # before the scan has reported its total
        self._state = self._state.start(0)
        logger.info(f"Started conversion worker for {job.input_root} -> {job.output_root}")
        worker.start()
        return job

    @Slot(int)
    def _on_started(self, total: int) -> None:
        self._state = BatchState.idle().start(total)
        self.conversionStarted.emit(total)

    @Slot(float)
    def _on_progress(self, fraction: float) -> None:
        self._state = self._state.advance()
        self.progressChanged.emit(fraction)

    @Slot()
    def _on_completed(self) -> None:
        self._state = self._state.complete()
        logger.info("Conversion completed successfully")
        self.conversionCompleted.emit()

    @Slot(str)
    def _on_failed(self, reason: str) -> None:
        self._state = self._state.fail(reason)
        logger.error(f"Conversion failed: {reason}")
        self.conversionFailed.emit(reason)

    @Slot()
    def _cleanup_worker(self) -> None:
        """
        Release the worker thread after it has finished.
        This slot is connected to the worker's finished signal.
        """
        if self._cleanup_in_progress:
            logger.debug("Cleanup already in progress, skipping redundant call.")
            return

        self._cleanup_in_progress = True
        sender = self.sender()
        worker_to_clean = sender if isinstance(sender, ConversionWorker) else self.current_worker

        try:
            if worker_to_clean is self.current_worker:
                self.current_worker = None
                if self.is_running():
                    # The thread ended without a terminal event reaching us
                    self._on_failed("The conversion worker stopped unexpectedly")

            if worker_to_clean:
                if worker_to_clean.isRunning():
                    logger.warning(f"Worker {worker_to_clean.objectName()} is still running during cleanup. Waiting...")
                    worker_to_clean.wait(1000)
                worker_to_clean.deleteLater()
                logger.debug(f"Worker {worker_to_clean.objectName()} scheduled for deletion.")
        finally:
            self._cleanup_in_progress = False
            self.conversionFinished.emit()

    def wait_for_completion(self, timeout_ms: int = 0) -> bool:
        """
        Wait for the current worker thread to finish.

        This blocks the calling thread and should only be used during
        application shutdown or in tests.

        Args:
            timeout_ms: Maximum wait in milliseconds (0 waits forever)

        Returns:
            True if no worker is left running
        """
        worker = self.current_worker
        if worker is None:
            return True
        if timeout_ms <= 0:
            return worker.wait()
        return worker.wait(timeout_ms)

    @Slot()
    def shutdown(self, timeout_ms: int = 3000) -> None:
        """
        Wait for an active batch before the application quits.

        Batches cannot be cancelled and a running QThread must not be destroyed,
        so this returns only once the worker has stopped. A warning is logged
        when that takes longer than ``timeout_ms``.
        """
        if self.current_worker is None or not self.current_worker.isRunning():
            logger.debug("No active conversion during shutdown.")
            return

        logger.info("Application shutting down, waiting for active conversion.")
        if not self.wait_for_completion(timeout_ms):
            logger.warning(f"Worker did not finish within {timeout_ms}ms during shutdown, still waiting.")
            self.wait_for_completion()
