"""
Job queue — admission, FIFO ordering and termination bookkeeping.

    dispatch()         ┌──────────────────────────────┐  next_for_worker()
    ─────────────────> │ QUEUED  QUEUED  QUEUED  ...  │ ──────────────────> worker
    (validate, admit)  └──────────────────────────────┘  (only while RUNNING)
                                    │ cancel()                   │ complete()
                                    ▼                            ▼
                              ┌───────────────────────────────────────┐
                              │ ArchiveStore (CANCELLED/DONE/FAILED)  │
                              └───────────────────────────────────────┘

The active queue lives in memory (a dict in admission order plus a deque
of QUEUED ids) and is written through to the "jobs" table on every
mutation, so QUEUED jobs survive a restart (see restore()).

Locking:
- One re-entrant lock serializes dispatch / cancel / next_for_worker / complete,
  which keeps FIFO order and makes "check capacity, then admit" atomic.
- The state machine lock is always taken AFTER the queue lock, never before.
- Terminal transitions delete the row, then append a COPY of the job to the
  archive, and only then drop the in-memory entry. A failed archive write
  puts the row back, so a failure leaves the queue unchanged and a job is
  never archived twice.
- Callers only ever get copies; the queue's own CompressionJob objects
  never leave the lock.
"""

import dataclasses
import enum
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from control.state_machine import ProcessingStateMachine
from jobqueue.archive import ArchiveStore
from jobqueue.job import CompressionJob, DispatchRequest
from jobqueue.levels import normalize_levels
from models.enums import JobStatus, ProcessingState, TERMINAL_STATUSES
from models.errors import CapacityExceeded, ProcessingUnavailable, ValidationError
from models.job import JobRecord
from settings_store.store import SettingsStore
from worker.notifier import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

_CLOSED_STATES = {ProcessingState.SHUTTINGDOWN, ProcessingState.SHUTDOWN}
_REQUIRED_FIELDS = {
    "base_path": "basePath",
    "object_uid": "objectUid",
    "media_uid": "mediaUid",
    "mime_type": "mimeType",
}


class CancelOutcome(str, enum.Enum):
    CANCELLED = "CANCELLED"                # was QUEUED, archived right away
    CANCEL_REQUESTED = "CANCEL_REQUESTED"  # was PROCESSING, worker must acknowledge
    NOT_FOUND = "NOT_FOUND"                # unknown or already terminal, nothing done


class JobQueue:

    def __init__(
        self,
        settings_store: SettingsStore,
        state_machine: ProcessingStateMachine,
        archive: ArchiveStore,
        db_session_factory,
        notifier: Optional[Notifier] = None,
    ):
        self._settings_store = settings_store
        self._state_machine = state_machine
        self._archive = archive
        self._db_session_factory = db_session_factory
        self._notifier = notifier or LoggingNotifier()
        self._lock = threading.RLock()
        self._jobs: dict[int, CompressionJob] = {}  # active jobs, admission order
        self._waiting: deque[int] = deque()         # QUEUED ids, FIFO
        state_machine.add_listener(self._on_state_change)

    # ── Startup ─────────────────────────────────────────────────

    def restore(self) -> int:
        """
        Reload the persisted queue after a restart.

        QUEUED rows come back in admission order. PROCESSING rows belong to a
        process that died mid-job: their output is unknown, so they are failed
        and archived. Returns the number of jobs back in the queue.
        """
        with self._lock:
            session: Session = self._db_session_factory()
            try:
                records = session.query(JobRecord).order_by(JobRecord.id).all()
                jobs = [CompressionJob.from_record(record) for record in records]
            finally:
                session.close()

            interrupted = []
            for job in jobs:
                if job.status == JobStatus.PROCESSING:
                    interrupted.append(job)
                elif job.id not in self._jobs:
                    self._jobs[job.id] = job
                    self._waiting.append(job.id)

            for job in interrupted:
                self._move_to_archive(job, self._terminal_copy(
                    job, JobStatus.FAILED, "Interrupted by a restart while processing"
                ))

        if interrupted:
            logger.warning(f"Failed {len(interrupted)} jobs interrupted by a restart")
        logger.info(f"Restored {len(self._waiting)} queued jobs")
        return len(self._waiting)

    # ── Admission ───────────────────────────────────────────────

    def dispatch(self, request: DispatchRequest) -> int:
        """
        Admit a compression job. Returns the new job id.

        Raises:
            ValidationError: missing fields, malformed or duplicate levels
            ProcessingUnavailable: system is shutting down / shut down
            CapacityExceeded: queueMaxLength active jobs already
        """
        errors = [
            {"field": wire_name, "message": f"{wire_name} is required"}
            for attr, wire_name in _REQUIRED_FIELDS.items()
            if not (getattr(request, attr) or "").strip()
        ]
        if errors:
            raise ValidationError(errors, "Invalid dispatch request")
        levels = normalize_levels(request.levels) if request.levels else []

        with self._lock, self._state_machine.hold() as state:
            if state in _CLOSED_STATES:
                raise ProcessingUnavailable(state.value)

            config = self._settings_store.get()
            if not levels:
                levels = list(config.default_levels)
            if not levels:
                raise ValidationError.single("levels", "At least one level is required")

            if len(self._jobs) >= config.queue_max_length:
                raise CapacityExceeded(config.queue_max_length)

            job = self._insert(request, levels)
            self._jobs[job.id] = job
            self._waiting.append(job.id)

        logger.info(f"Dispatched compression job {job.id}: {job.title} {job.levels}")
        return job.id

    def cancel(self, job_id: int) -> CancelOutcome:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                logger.info(f"Cancel of job {job_id} had no effect (unknown or finished)")
                return CancelOutcome.NOT_FOUND

            if job.status == JobStatus.PROCESSING:
                job.cancel_requested = True
                logger.info(f"Cancellation requested for processing job {job_id}")
                return CancelOutcome.CANCEL_REQUESTED

            finished = self._finish(job, JobStatus.CANCELLED, "Cancelled by user")

        logger.info(f"Cancelled compression job {job_id}")
        self._notify(finished)
        return CancelOutcome.CANCELLED

    # ── Worker side ─────────────────────────────────────────────

    def next_for_worker(self) -> Optional[CompressionJob]:
        """
        Non-blocking poll: hand out the FIFO head, or None.

        Only while RUNNING (or while SHUTTINGDOWN in drain-queue mode).
        The state is held for the whole pop, so a pause or shutdown cannot
        slip in between the check and the dequeue.
        """
        with self._lock, self._state_machine.hold() as state:
            draining = state == ProcessingState.SHUTTINGDOWN and self._state_machine.drain_queue
            if state != ProcessingState.RUNNING and not draining:
                return None
            if not self._waiting:
                return None

            job = self._jobs[self._waiting[0]]
            started_at = datetime.now(timezone.utc)
            self._update_record(job.id, status=JobStatus.PROCESSING.value, started_at=started_at)
            self._waiting.popleft()
            job.status = JobStatus.PROCESSING
            job.started_at = started_at

        logger.info(f"Started processing job {job.id} ({job.title})")
        return self._copy(job)

    def is_cancel_requested(self, job_id: int) -> bool:
        with self._lock:
            job = self._jobs.get(job_id)
            return job is not None and job.cancel_requested

    def complete(
        self, job_id: int, outcome: JobStatus, error_message: Optional[str] = None
    ) -> bool:
        """
        Record the worker's verdict for a PROCESSING job.

        outcome is DONE, FAILED or CANCELLED (the worker acknowledging a
        cancel request). Returns False if the job is not PROCESSING here.
        """
        if outcome not in TERMINAL_STATUSES:
            raise ValueError(f"{outcome} is not a terminal status")

        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.status != JobStatus.PROCESSING:
                logger.warning(f"Completion for job {job_id} ignored, job is not processing")
                return False
            finished = self._finish(job, outcome, error_message)

        logger.info(f"Finished processing job {job_id} with {outcome.value}")
        self._notify(finished)
        return True

    # ── Read side ───────────────────────────────────────────────

    def list_pending(self) -> list[CompressionJob]:
        """Snapshot of active jobs (QUEUED + PROCESSING), admission order."""
        with self._lock:
            return [self._copy(job) for job in self._jobs.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    # ── Internals ───────────────────────────────────────────────

    def _finish(
        self, job: CompressionJob, status: JobStatus, error_message: Optional[str]
    ) -> CompressionJob:
        """Move a job to the archive. Caller holds the lock."""
        finished = self._terminal_copy(job, status, error_message)
        self._move_to_archive(job, finished)

        del self._jobs[job.id]
        if job.id in self._waiting:
            self._waiting.remove(job.id)
        job.status = status

        self._maybe_finish_shutdown()
        return finished

    def _move_to_archive(self, job: CompressionJob, finished: CompressionJob) -> None:
        """
        Hand a job over from the "jobs" table to the archive, exactly once.

        The row is deleted first. If the archive write then fails, the row is
        put back, so the job is in exactly one of the two stores either way
        and a retried cancel/complete cannot archive it twice.
        """
        self._delete_record(job.id)
        try:
            self._archive.append(finished)
        except Exception:
            logger.error(f"Archiving job {job.id} failed, restoring its queue record")
            self._reinsert_record(job)
            raise

    @staticmethod
    def _copy(job: CompressionJob) -> CompressionJob:
        return dataclasses.replace(job, levels=list(job.levels))

    @staticmethod
    def _terminal_copy(
        job: CompressionJob, status: JobStatus, error_message: Optional[str]
    ) -> CompressionJob:
        return dataclasses.replace(
            job,
            levels=list(job.levels),
            status=status,
            completed_at=datetime.now(timezone.utc),
            error_message=error_message,
            cancel_requested=False,
        )

    def _on_state_change(self, state: ProcessingState) -> None:
        if state == ProcessingState.SHUTTINGDOWN:
            with self._lock:
                self._maybe_finish_shutdown()

    def _maybe_finish_shutdown(self) -> None:
        """SHUTTINGDOWN → SHUTDOWN once nothing is left to wait for. Caller holds the lock."""
        if self._state_machine.state != ProcessingState.SHUTTINGDOWN:
            return
        if any(job.status == JobStatus.PROCESSING for job in self._jobs.values()):
            return
        if self._state_machine.drain_queue and self._waiting:
            return
        self._state_machine.finish_shutdown()

    def _notify(self, job: CompressionJob) -> None:
        if not job.notification_email:
            return
        try:
            self._notifier.job_finished(job)
        except Exception as e:
            # the job is archived already, a lost mail must not undo that
            logger.error(f"Notification for job {job.id} failed: {e}", exc_info=True)

    # ── Persistence (write-through) ─────────────────────────────

    def _insert(self, request: DispatchRequest, levels: list[str]) -> CompressionJob:
        session: Session = self._db_session_factory()
        try:
            record = JobRecord(
                status=JobStatus.QUEUED.value,
                base_path=request.base_path,
                object_uid=request.object_uid,
                media_uid=request.media_uid,
                title=request.title,
                mime_type=request.mime_type,
                notification_email=request.notification_email,
                levels=levels,
                submitted_at=datetime.now(timezone.utc),
            )
            session.add(record)
            session.commit()
            return CompressionJob.from_record(record)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _update_record(self, job_id: int, **values) -> None:
        session: Session = self._db_session_factory()
        try:
            session.query(JobRecord).filter(JobRecord.id == job_id).update(values)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _delete_record(self, job_id: int) -> None:
        session: Session = self._db_session_factory()
        try:
            session.query(JobRecord).filter(JobRecord.id == job_id).delete()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _reinsert_record(self, job: CompressionJob) -> None:
        """Put back a row deleted by _move_to_archive, with its original id."""
        session: Session = self._db_session_factory()
        try:
            session.add(JobRecord(
                id=job.id,
                status=job.status.value,
                base_path=job.base_path,
                object_uid=job.object_uid,
                media_uid=job.media_uid,
                title=job.title,
                mime_type=job.mime_type,
                notification_email=job.notification_email,
                levels=list(job.levels),
                submitted_at=job.submitted_at,
                started_at=job.started_at,
            ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
