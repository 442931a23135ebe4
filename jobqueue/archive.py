"""
Archive store — append-only record of jobs that left the active queue.

Backed by a Redis list, the same way the dead-letter queue used to be:
    RPUSH  → append a finished job (the only mutation)
    LRANGE → read a page
    LLEN   → count

There is deliberately no delete operation here. Retention is an external
policy (e.g. a cron job trimming the list), not part of the control plane.
"""

import json
import logging
from typing import Optional

from redis import Redis

from config.settings import settings
from jobqueue.job import CompressionJob

logger = logging.getLogger(__name__)


class ArchiveStore:

    def __init__(self, redis_client: Redis, key: str = settings.REDIS_ARCHIVE_KEY):
        self._redis = redis_client
        self._key = key

    def append(self, job: CompressionJob) -> None:
        """Record a terminal job. Non-terminal jobs are a programming error."""
        if not job.status.is_terminal:
            raise ValueError(f"Cannot archive job {job.id} in {job.status.value} state")
        self._redis.rpush(self._key, json.dumps(job.to_dict()))
        logger.debug(f"Archived job {job.id} as {job.status.value}")

    def list(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = True,
    ) -> list[CompressionJob]:
        """
        Read a page of archived jobs.

        newest_first=True  → reverse-chronological (what the archive page shows)
        newest_first=False → insertion order

        Redis list indices are inclusive on both ends and negative indices
        count from the tail, so the newest-first page is read as a slice
        from the end and reversed afterwards.
        """
        if limit == 0:
            return []
        if offset < 0 or (limit is not None and limit < 0):
            raise ValueError("limit and offset must be non-negative")

        if newest_first:
            end = -1 - offset
            start = 0 if limit is None else end - limit + 1
            raw_entries = list(reversed(self._redis.lrange(self._key, start, end)))
        else:
            end = -1 if limit is None else offset + limit - 1
            raw_entries = self._redis.lrange(self._key, offset, end)

        return [CompressionJob.from_dict(json.loads(entry)) for entry in raw_entries]

    def count(self) -> int:
        return self._redis.llen(self._key)
