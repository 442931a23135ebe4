"""
FastAPI dependency injection.

How this works:
- The lifespan (or a test fixture) calls api.main.init_components(), which
  builds the settings store, state machine, archive and queue once and
  stores them on app.state
- An endpoint declares `job_queue: JobQueue = Depends(get_job_queue)`
- FastAPI resolves it from app.state before the endpoint runs

require_whitelisted is attached to every router except /health: a client
whose address is not in the configured whitelist (and no "*" entry) gets 403.
"""

import logging

from fastapi import Depends, HTTPException, Request
from redis import Redis

from control.state_machine import ProcessingStateMachine
from jobqueue.archive import ArchiveStore
from jobqueue.queue import JobQueue
from settings_store.store import SettingsStore

logger = logging.getLogger(__name__)


async def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store


async def get_state_machine(request: Request) -> ProcessingStateMachine:
    return request.app.state.state_machine


async def get_job_queue(request: Request) -> JobQueue:
    return request.app.state.job_queue


async def get_archive(request: Request) -> ArchiveStore:
    return request.app.state.archive


async def get_redis(request: Request) -> Redis:
    """Returns the Redis client stored on the app during startup."""
    return request.app.state.redis


async def get_db_session_factory(request: Request):
    return request.app.state.db_session_factory


async def require_whitelisted(
    request: Request,
    settings_store: SettingsStore = Depends(get_settings_store),
) -> None:
    host = request.client.host if request.client else None
    if not settings_store.is_client_allowed(host):
        logger.info(f"Access from host {host} has been denied.")
        raise HTTPException(status_code=403, detail=f"Access from host {host} denied")
