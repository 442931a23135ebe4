"""
Archive endpoint.

GET /archive/jobs → finished jobs (DONE, FAILED, CANCELLED), newest first

The page size is capped at ARCHIVE_DISPLAY_LENGTH; the archive itself
keeps everything.
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_archive, require_whitelisted
from api.schemas.job import JobListResponse, JobSummary
from config.settings import settings
from jobqueue.archive import ArchiveStore

router = APIRouter(prefix="/archive", tags=["archive"], dependencies=[Depends(require_whitelisted)])


@router.get("/jobs", response_model=JobListResponse)
def list_archived_jobs(
    limit: int = Query(
        settings.ARCHIVE_DISPLAY_LENGTH, ge=1, le=settings.ARCHIVE_DISPLAY_LENGTH
    ),
    offset: int = Query(0, ge=0),
    archive: ArchiveStore = Depends(get_archive),
) -> JobListResponse:
    jobs = archive.list(limit=limit, offset=offset, newest_first=True)
    return JobListResponse(items=[JobSummary.model_validate(job) for job in jobs])
