"""
Pydantic schemas for the /jobs and /archive endpoints.

These are NOT the queue's data classes — they define the HTTP API contract:
- JobDispatch: what a client sends to dispatch a job (request body)
- JobSummary: one queue or archive entry (response body)
- JobListResponse: the queue or a page of the archive
- DispatchResponse: the id of the admitted job

Field names are camelCase on the wire (basePath, mimeType...), which is
what the web front-end sends. Every response also carries the
{success, message} envelope the front-end checks.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from jobqueue.job import DispatchRequest
from models.enums import JobStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DefaultResponse(CamelModel):
    success: bool = True
    message: str


class JobDispatch(CamelModel):
    """Request body for POST /jobs/dispatch."""

    base_path: str = Field(..., min_length=1, examples=["/objects/4711"])
    object_uid: str = Field(..., min_length=1)
    media_uid: str = Field(..., min_length=1)
    title: Optional[str] = Field(default=None, examples=["statue.obj"])
    mime_type: str = Field(..., min_length=1, examples=["image/jpeg"])
    notification_email: Optional[str] = None
    levels: list[Union[int, str]] = Field(
        default_factory=list,
        description="Target sizes or 'Automatic'. Empty → configured default levels",
        examples=[[1000, 5000, "Automatic"]],
    )

    def to_request(self) -> DispatchRequest:
        return DispatchRequest(
            base_path=self.base_path,
            object_uid=self.object_uid,
            media_uid=self.media_uid,
            title=self.title,
            mime_type=self.mime_type,
            notification_email=self.notification_email,
            levels=list(self.levels),
        )


class JobSummary(CamelModel):
    """One queue or archive entry."""

    id: int
    base_path: str
    object_uid: str
    media_uid: str
    title: Optional[str] = None
    mime_type: str
    notification_email: Optional[str] = None
    levels: list[str]
    status: JobStatus
    submitted_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None

    # read straight from CompressionJob dataclass attributes
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class JobListResponse(DefaultResponse):
    message: str = "Data retrieval successful."
    items: list[JobSummary]


class DispatchResponse(DefaultResponse):
    message: str = "Job dispatched."
    id: int
