"""
Lightweight job representations used by the queue, the archive and the worker.

CompressionJob is a plain dataclass, NOT the ORM row:
- The queue keeps these in memory and only writes through to the database
- The archive serializes them to JSON in Redis
- Tests can build them without a database
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional

from models.enums import JobStatus
from models.job import JobRecord


@dataclass
class DispatchRequest:
    """What a client asks for. Levels are still raw (ints / strings / empty)."""
    base_path: str
    object_uid: str
    media_uid: str
    mime_type: str
    title: Optional[str] = None
    notification_email: Optional[str] = None
    levels: list = field(default_factory=list)


@dataclass
class CompressionJob:
    id: int
    base_path: str
    object_uid: str
    media_uid: str
    title: Optional[str]
    mime_type: str
    levels: list[str]
    status: JobStatus
    submitted_at: datetime
    notification_email: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    cancel_requested: bool = False  # in-memory only, never persisted

    @classmethod
    def from_record(cls, record: JobRecord) -> "CompressionJob":
        return cls(
            id=record.id,
            base_path=record.base_path,
            object_uid=record.object_uid,
            media_uid=record.media_uid,
            title=record.title,
            mime_type=record.mime_type,
            levels=list(record.levels),
            status=JobStatus(record.status),
            submitted_at=record.submitted_at,
            notification_email=record.notification_email,
            started_at=record.started_at,
        )

    def to_dict(self) -> dict:
        """JSON-safe representation (used for the Redis archive)."""
        data = asdict(self)
        data["status"] = self.status.value
        for key in ("submitted_at", "started_at", "completed_at"):
            value = data[key]
            data[key] = value.isoformat() if value is not None else None
        data.pop("cancel_requested")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CompressionJob":
        values = dict(data)
        values["status"] = JobStatus(values["status"])
        for key in ("submitted_at", "started_at", "completed_at"):
            if values.get(key) is not None:
                values[key] = datetime.fromisoformat(values[key])
        return cls(**values)

    def __repr__(self) -> str:
        return f"<CompressionJob {self.id} [{self.mime_type}] {self.status.value}>"
