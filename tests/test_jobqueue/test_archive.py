"""Tests for the Redis-backed ArchiveStore."""

from datetime import datetime, timezone

import pytest

from jobqueue.archive import ArchiveStore
from jobqueue.job import CompressionJob
from models.enums import JobStatus


def _job(job_id, status=JobStatus.DONE, **overrides):
    values = dict(
        id=job_id,
        base_path="/objects/1",
        object_uid="obj-1",
        media_uid=f"media-{job_id}",
        title=f"job {job_id}",
        mime_type="image/png",
        levels=["1000"],
        status=status,
        submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        completed_at=datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return CompressionJob(**values)


@pytest.fixture
def filled_archive(archive):
    for job_id in range(1, 6):
        archive.append(_job(job_id))
    return archive


def test_append_and_read_back(archive):
    archive.append(_job(1, JobStatus.FAILED, error_message="boom"))

    (job,) = archive.list()
    assert job.id == 1
    assert job.status == JobStatus.FAILED
    assert job.error_message == "boom"
    assert job.levels == ["1000"]
    assert job.completed_at == datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc)


def test_non_terminal_job_is_rejected(archive):
    with pytest.raises(ValueError):
        archive.append(_job(1, JobStatus.QUEUED))
    assert archive.count() == 0


def test_newest_first_by_default(filled_archive):
    assert [j.id for j in filled_archive.list()] == [5, 4, 3, 2, 1]


def test_insertion_order(filled_archive):
    assert [j.id for j in filled_archive.list(newest_first=False)] == [1, 2, 3, 4, 5]


def test_limit_and_offset_newest_first(filled_archive):
    assert [j.id for j in filled_archive.list(limit=2)] == [5, 4]
    assert [j.id for j in filled_archive.list(limit=2, offset=2)] == [3, 2]
    assert [j.id for j in filled_archive.list(limit=10, offset=4)] == [1]


def test_limit_and_offset_insertion_order(filled_archive):
    assert [j.id for j in filled_archive.list(limit=2, offset=1, newest_first=False)] == [2, 3]


def test_offset_past_the_end_is_empty(filled_archive):
    assert filled_archive.list(offset=10) == []
    assert filled_archive.list(limit=3, offset=10, newest_first=False) == []


def test_zero_limit_is_empty(filled_archive):
    assert filled_archive.list(limit=0) == []


def test_negative_arguments_are_rejected(filled_archive):
    with pytest.raises(ValueError):
        filled_archive.list(limit=-1)
    with pytest.raises(ValueError):
        filled_archive.list(offset=-1)


def test_count(filled_archive):
    assert filled_archive.count() == 5


def test_separate_keys_do_not_mix(fake_redis):
    first = ArchiveStore(fake_redis, key="archive:a")
    second = ArchiveStore(fake_redis, key="archive:b")
    first.append(_job(1))

    assert second.count() == 0
