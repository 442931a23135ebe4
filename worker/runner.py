"""
Compression worker — the loop that pulls jobs from the queue.

    ┌──────────────────────────────────────────────┐
    │ CompressionWorker (daemon thread)            │
    │                                              │
    │   job = queue.next_for_worker()              │
    │     ├─ None  → sleep WORKER_POLL_INTERVAL    │
    │     └─ job   → executor.execute(job)         │
    └──────────────────────────────────────────────┘

The queue never pushes. next_for_worker() is a non-blocking poll that
returns None while the system is not RUNNING or the queue is empty, so
pausing the system simply makes this loop idle. Jobs are processed one
at a time, in FIFO order.
"""

import logging
import threading

from config.settings import settings
from jobqueue.queue import JobQueue
from settings_store.store import SettingsStore
from worker.executor import CompressionExecutor

logger = logging.getLogger(__name__)


class CompressionWorker:

    def __init__(
        self,
        job_queue: JobQueue,
        settings_store: SettingsStore,
        poll_interval: float = settings.WORKER_POLL_INTERVAL,
    ):
        self._queue = job_queue
        self._executor = CompressionExecutor(job_queue, settings_store)
        self._poll_interval = poll_interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the polling loop in a daemon thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop, name="compression-worker", daemon=True
        )
        self._thread.start()
        logger.info("Compression worker started")

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to stop. The job in progress (if any) is finished first."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
        logger.info("Compression worker stopped")

    def run_once(self) -> bool:
        """Process at most one job. Returns True if a job was processed."""
        job = self._queue.next_for_worker()
        if job is None:
            return False
        self._executor.execute(job)
        return True

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                if self.run_once():
                    continue
            except Exception as e:
                logger.error(f"Worker loop error: {e}", exc_info=True)
            self._stop_event.wait(self._poll_interval)
