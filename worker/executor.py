"""
Compression executor — runs a single job and reports the verdict to the queue.

Lifecycle of one job:

    1. The queue already marked it PROCESSING (next_for_worker)
    2. If a cancel was requested in the meantime → CANCELLED, nothing runs
    3. Find the handler for the job's MIME type, call handler.compress()
    4. Cancel requested while compressing → CANCELLED (files already written
       stay on disk)
    5. Otherwise DONE, or FAILED if the handler raised

Failures are never retried here. A retry is a new dispatch by the client.
"""

import logging
import time

from jobs.registry import get_compression_handler
from jobqueue.job import CompressionJob
from jobqueue.queue import JobQueue
from models.enums import JobStatus
from settings_store.store import SettingsStore

logger = logging.getLogger(__name__)


class CompressionExecutor:

    def __init__(self, job_queue: JobQueue, settings_store: SettingsStore):
        self._queue = job_queue
        self._settings_store = settings_store

    def execute(self, job: CompressionJob) -> JobStatus:
        """Process one job handed out by the queue. Returns the reported status."""
        if self._queue.is_cancel_requested(job.id):
            self._queue.complete(job.id, JobStatus.CANCELLED, "Cancelled by user")
            return JobStatus.CANCELLED

        try:
            handler = get_compression_handler(job.mime_type)
            start_time = time.monotonic()
            result = handler.compress(job, self._settings_store.get())
            elapsed = time.monotonic() - start_time
        except Exception as e:
            logger.error(f"Error while compressing job {job.id}: {e}")
            self._queue.complete(job.id, JobStatus.FAILED, str(e))
            return JobStatus.FAILED

        if self._queue.is_cancel_requested(job.id):
            self._queue.complete(job.id, JobStatus.CANCELLED, "Cancelled by user")
            return JobStatus.CANCELLED

        logger.info(f"Job {job.id} [{job.mime_type}] compressed in {elapsed:.3f}s: {result}")
        self._queue.complete(job.id, JobStatus.DONE)
        return JobStatus.DONE
