"""
Job queue endpoints.

POST   /jobs/dispatch     → Admit a new compression job
GET    /jobs/queue        → Active jobs (QUEUED + PROCESSING), FIFO order
DELETE /jobs/cancel/{id}  → Cancel a queued job / request cancel of a processing one

The API layer is intentionally thin:
- Validate input shape (Pydantic does this automatically)
- Call the JobQueue
- Translate queue errors into HTTP status codes

It does NOT execute jobs — that's the worker's job.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_job_queue, require_whitelisted
from api.schemas.job import (
    DefaultResponse,
    DispatchResponse,
    JobDispatch,
    JobListResponse,
    JobSummary,
)
from jobqueue.queue import CancelOutcome, JobQueue
from models.errors import CapacityExceeded, ProcessingUnavailable, ValidationError

router = APIRouter(prefix="/jobs", tags=["jobs"], dependencies=[Depends(require_whitelisted)])

_CANCEL_MESSAGES = {
    CancelOutcome.CANCELLED: "Job cancelled.",
    CancelOutcome.CANCEL_REQUESTED: "Cancellation requested, job is being processed.",
    CancelOutcome.NOT_FOUND: "No queued job with this id, nothing to cancel.",
}


@router.post("/dispatch", response_model=DispatchResponse, status_code=201)
def dispatch_job(
    job_in: JobDispatch,
    job_queue: JobQueue = Depends(get_job_queue),
) -> DispatchResponse:
    """
    Dispatch a compression job.

    Empty levels → the configured default levels are used.
    422 for invalid levels, 429 if the queue is full,
    503 if the system is shutting down.
    """
    try:
        job_id = job_queue.dispatch(job_in.to_request())
    except ValidationError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "errors": e.errors})
    except CapacityExceeded as e:
        raise HTTPException(status_code=429, detail=str(e))
    except ProcessingUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return DispatchResponse(id=job_id)


@router.get("/queue", response_model=JobListResponse)
def get_job_queue_items(
    job_queue: JobQueue = Depends(get_job_queue),
) -> JobListResponse:
    """All unfinished jobs in admission order."""
    return JobListResponse(
        items=[JobSummary.model_validate(job) for job in job_queue.list_pending()]
    )


@router.delete("/cancel/{job_id}", response_model=DefaultResponse)
def cancel_job(
    job_id: int,
    job_queue: JobQueue = Depends(get_job_queue),
) -> DefaultResponse:
    """
    Cancel a job.

    QUEUED jobs are archived as CANCELLED right away. PROCESSING jobs only
    get a cancel request; the worker decides at its next safe point.
    Unknown or finished ids are a harmless no-op, not an error.
    """
    outcome = job_queue.cancel(job_id)
    return DefaultResponse(message=_CANCEL_MESSAGES[outcome])
