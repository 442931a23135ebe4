"""
Shared enumerations used across the entire project.

Using Python enums (inheriting from str) means:
- They serialize to JSON automatically ("QUEUED", not "JobStatus.QUEUED")
- They work as SQLAlchemy column values
- They work as FastAPI request/response fields
- Typos become immediate errors instead of silent bugs
"""

import enum


class JobStatus(str, enum.Enum):
    QUEUED = "QUEUED"          # admitted, waiting for the worker
    PROCESSING = "PROCESSING"  # handed to the worker
    DONE = "DONE"              # compressed successfully
    FAILED = "FAILED"          # worker reported a failure
    CANCELLED = "CANCELLED"    # cancelled before or during processing

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({JobStatus.DONE, JobStatus.FAILED, JobStatus.CANCELLED})


class ProcessingState(str, enum.Enum):
    STARTUP = "STARTUP"            # process booted, nothing handed out yet
    RUNNING = "RUNNING"            # worker may pull jobs
    PAUSED = "PAUSED"              # admissions continue, worker idles
    SHUTTINGDOWN = "SHUTTINGDOWN"  # admissions closed, in-flight work finishing
    SHUTDOWN = "SHUTDOWN"          # terminal


class ControlCommand(str, enum.Enum):
    RUN = "RUN"
    PAUSE = "PAUSE"
    SHUTDOWN_IMMEDIATELY = "SHUTDOWN_IMMEDIATELY"      # finish in-flight jobs only
    SHUTDOWN_PROCESS_QUEUE = "SHUTDOWN_PROCESS_QUEUE"  # drain the whole queue first


# Level keyword letting the compressor pick the target size itself
AUTOMATIC_LEVEL = "Automatic"
