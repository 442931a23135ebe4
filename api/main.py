"""
FastAPI application factory.

This file:
1. Creates the FastAPI app
2. Runs startup logic (create DB tables, connect to Redis, build the
   settings store, state machine, archive and job queue, start the worker)
3. Registers all routers (jobs, archive, control, settings, health)
4. Runs shutdown logic (stop the worker, close connections)

The `lifespan` context manager is FastAPI's way of handling startup/shutdown.
It replaces the older @app.on_event("startup") pattern.

To run:  python -m api.main
The port is the apiPort of the stored configuration, not a CLI flag.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from redis import Redis

from config.settings import settings
from control.state_machine import ProcessingStateMachine
from jobqueue.archive import ArchiveStore
from jobqueue.queue import JobQueue
from models.base import Base, SessionLocal, engine
from models.enums import ProcessingState
from settings_store.store import SettingsStore
from worker.runner import CompressionWorker
from api.routers import archive, control, health, jobs, settings as settings_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def init_components(app: FastAPI, redis_client: Redis, db_session_factory) -> None:
    """
    Build the core components and store them on app.state.

    Order matters: the queue needs a loaded configuration and the state
    machine, and restore() must run before anything can be dispatched.
    """
    settings_store = SettingsStore(redis_client)
    config = settings_store.load()

    state_machine = ProcessingStateMachine()
    archive_store = ArchiveStore(redis_client)
    job_queue = JobQueue(settings_store, state_machine, archive_store, db_session_factory)
    job_queue.restore()

    app.state.redis = redis_client
    app.state.db_session_factory = db_session_factory
    app.state.settings_store = settings_store
    app.state.state_machine = state_machine
    app.state.archive = archive_store
    app.state.job_queue = job_queue

    if config.autostart:
        state_machine.start()
    else:
        logger.info("Autostart disabled, waiting for a RUN command")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Runs on startup (before yield) and shutdown (after yield).

    Startup:
    - Creates all DB tables if they don't exist (safe to run multiple times)
    - Connects to Redis
    - Builds the components and restores the persisted queue
    - Starts the compression worker

    Shutdown:
    - Stops the worker (the job in progress is finished first)
    - Closes Redis connection
    - Disposes the DB engine (closes connection pool)
    """
    # ── Startup ─────────────────────────────────────────────────
    logger.info("Creating database tables...")
    Base.metadata.create_all(engine)

    redis_client = Redis.from_url(settings.redis_url)
    init_components(app, redis_client, SessionLocal)

    def stop_server_on_shutdown(state: ProcessingState) -> None:
        server = getattr(app.state, "server", None)
        if state == ProcessingState.SHUTDOWN and server is not None:
            logger.info("Processing shut down, stopping the API server")
            server.should_exit = True

    app.state.state_machine.add_listener(stop_server_on_shutdown)

    worker = CompressionWorker(app.state.job_queue, app.state.settings_store)
    worker.start()
    logger.info(f"API ready — processing state: {app.state.state_machine.state.value}")

    yield  # app is running and serving requests between startup and shutdown

    # ── Shutdown ────────────────────────────────────────────────
    worker.stop()
    redis_client.close()
    engine.dispose()
    logger.info("API shut down")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    app = FastAPI(
        title="Compression Control",
        description="Control plane of a media compression service: job queue, processing state and settings",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )

    # Each router adds its endpoints to the app
    app.include_router(health.router)
    app.include_router(jobs.router)
    app.include_router(archive.router)
    app.include_router(control.router)
    app.include_router(settings_router.router)

    return app


# This is what uvicorn imports: `uvicorn api.main:app`
app = create_app()


def main() -> None:
    """Serve on the configured apiPort. Exits once processing is shut down."""
    port = SettingsStore(Redis.from_url(settings.redis_url)).load().api_port
    server = uvicorn.Server(uvicorn.Config(app, host=settings.API_HOST, port=port))
    app.state.server = server
    server.run()


if __name__ == "__main__":
    main()
