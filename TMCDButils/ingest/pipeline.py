"""Multi-threaded ingestion of legacy monitor records.

Workers share one bounded queue: producers block when it is full, workers
block when it is empty. Each worker decodes a record and applies it through
the :class:`Upserter`. A failing record is counted and logged and never
stops its worker; only :meth:`IngestionPipeline.stop` does, and records
still queued at that point are left undrained.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Dict, Iterable, List, Mapping, Optional

from .context import IngestContext
from .decoder import decode_record
from .upsert import Upserter

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4
DEFAULT_QUEUE_SIZE = 10000
DEFAULT_POLL_INTERVAL = 0.5


class IngestionPipeline:
    """N worker threads draining one shared intake queue."""

    def __init__(
        self,
        context: IngestContext,
        num_workers: int = DEFAULT_WORKERS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        if num_workers < 1:
            raise ValueError(f"num_workers must be positive, got {num_workers}")
        self.context = context
        self.num_workers = num_workers
        self.poll_interval = poll_interval
        self.queue: "queue.Queue[Mapping]" = queue.Queue(maxsize=queue_size)
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Pipeline already started")
        self._stop_event.clear()
        for n in range(1, self.num_workers + 1):
            thread = threading.Thread(
                target=self._worker_loop, name=f"IngestWorker-{n}", daemon=True
            )
            thread.start()
            self._threads.append(thread)
        logger.info("Started %d ingestion workers", self.num_workers)

    def stop(self) -> None:
        """Ask every worker to exit once its current record is done."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the workers; once all have exited, log the summary once.

        The pipeline can then be started again.
        """
        for thread in self._threads:
            thread.join(timeout)
        if self._threads and not self.is_running:
            self._threads = []
            self.context.stats.log_summary()

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def __enter__(self) -> "IngestionPipeline":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
        self.join()

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------
    def submit(self, record: Mapping, timeout: Optional[float] = None) -> None:
        """Queue one legacy record, blocking while the queue is full."""
        self.queue.put(record, timeout=timeout)

    def run_records(self, records: Iterable[Mapping]) -> Dict[str, int]:
        """Feed ``records``, wait until every one is processed, then stop."""
        if not self._threads:
            self.start()
        try:
            for record in records:
                self.submit(record)
            self.queue.join()
        finally:
            self.stop()
            self.join()
        return self.context.stats.snapshot()

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------
    def process(self, record: Mapping, upserter: Upserter) -> None:
        ctx = self.context
        sample = decode_record(record, hour_offset=ctx.hour_offset, sample_time=ctx.sample_time)
        upserter.upsert(sample, preallocate=ctx.preallocate)

    def _worker_loop(self) -> None:
        name = threading.current_thread().name
        upserter = Upserter(self.context)
        while not self._stop_event.is_set():
            try:
                record = self.queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            try:
                self.process(record, upserter)
            except Exception as exc:
                self.context.stats.record_error()
                logger.error("%s: failed to ingest record: %s", name, exc, exc_info=True)
            finally:
                self.queue.task_done()
        logger.debug("%s stopped", name)
