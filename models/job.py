"""
Job ORM model — maps to the "jobs" table.

This table holds the ACTIVE queue only (QUEUED and PROCESSING jobs).
When a job reaches a terminal state its summary is appended to the
Redis archive and the row is deleted.

Key design decisions:
- Integer autoincrement primary key that never hands out an id twice, even
  after rows are deleted (a Postgres sequence; AUTOINCREMENT on SQLite):
  ids double as admission order and identify archive entries, and
  DELETE /jobs/cancel/{id} takes a plain integer
- JSON column for levels: an ordered list of "1000" / "Automatic" strings
- Timestamps at every lifecycle stage, copied into the archive entry
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, Text, JSON, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.enums import JobStatus


class JobRecord(Base):
    __tablename__ = "jobs"
    # SQLite would otherwise reuse the rowid of a deleted (archived) job
    __table_args__ = {"sqlite_autoincrement": True}

    # ── Identity ────────────────────────────────────────────────
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status: Mapped[str] = mapped_column(
        String(20), default=JobStatus.QUEUED.value, nullable=False, index=True
    )

    # ── Descriptive fields (immutable after admission) ──────────
    base_path: Mapped[str] = mapped_column(Text, nullable=False)
    object_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    media_uid: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    notification_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    levels: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # ── Lifecycle timestamps ────────────────────────────────────
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<JobRecord {self.id} [{self.mime_type}] {self.status}>"
