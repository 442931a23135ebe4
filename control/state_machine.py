"""
Processing state machine — the global run/pause/shutdown switch.

    ┌─────────┐  start   ┌─────────┐  pause   ┌────────┐
    │ STARTUP │ ───────> │ RUNNING │ ───────> │ PAUSED │
    └─────────┘          └─────────┘ <─────── └────────┘
         │                    │        start       │
         │      shutdown      │     shutdown       │  shutdown
         └──────────────┐     │     ┌──────────────┘
                        ▼     ▼     ▼
                     ┌──────────────┐  finish_shutdown  ┌──────────┐
                     │ SHUTTINGDOWN │ ────────────────> │ SHUTDOWN │
                     └──────────────┘                   └──────────┘

Every command not drawn above raises InvalidTransition and leaves the
state unchanged. The front-end only ever sends a toggle, so the table is
enforced here rather than trusted.

The machine knows nothing about the queue. The queue observes it:
- it registers a listener (called after every transition, outside the lock)
- it uses hold() to check the state and pop a job as one atomic step
- it calls finish_shutdown() once the in-flight work is done
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from models.enums import ProcessingState, ControlCommand
from models.errors import InvalidTransition

logger = logging.getLogger(__name__)

StateListener = Callable[[ProcessingState], None]

_START_FROM = {ProcessingState.STARTUP, ProcessingState.PAUSED}
_PAUSE_FROM = {ProcessingState.RUNNING}
_SHUTDOWN_FROM = {ProcessingState.STARTUP, ProcessingState.RUNNING, ProcessingState.PAUSED}


class ProcessingStateMachine:

    def __init__(self):
        self._state = ProcessingState.STARTUP
        self._drain_queue = False
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ProcessingState:
        with self._lock:
            return self._state

    @property
    def drain_queue(self) -> bool:
        """True if the pending shutdown should process the remaining queue first."""
        return self._drain_queue

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    @contextmanager
    def hold(self) -> Iterator[ProcessingState]:
        """
        Block transitions while the caller acts on the current state.

        Used by the queue so that "is the system RUNNING?" and "pop the head"
        cannot be split by a concurrent pause/shutdown.
        """
        with self._lock:
            yield self._state

    # ── Commands ────────────────────────────────────────────────

    def start(self) -> ProcessingState:
        return self._transition("start", _START_FROM, ProcessingState.RUNNING)

    def pause(self) -> ProcessingState:
        return self._transition("pause", _PAUSE_FROM, ProcessingState.PAUSED)

    def shutdown(self, drain_queue: bool = False) -> ProcessingState:
        """
        Close admissions and let in-flight jobs finish.

        drain_queue=False → only PROCESSING jobs finish, QUEUED jobs stay persisted
        drain_queue=True  → the worker keeps pulling until the queue is empty
        """
        return self._transition(
            "shutdown", _SHUTDOWN_FROM, ProcessingState.SHUTTINGDOWN, drain_queue=drain_queue
        )

    def apply_command(self, command: ControlCommand) -> ProcessingState:
        """Dispatch a wire-level command to the matching transition."""
        if command == ControlCommand.RUN:
            return self.start()
        if command == ControlCommand.PAUSE:
            return self.pause()
        if command == ControlCommand.SHUTDOWN_IMMEDIATELY:
            return self.shutdown(drain_queue=False)
        if command == ControlCommand.SHUTDOWN_PROCESS_QUEUE:
            return self.shutdown(drain_queue=True)
        raise ValueError(f"Unknown control command: {command}")

    def finish_shutdown(self) -> bool:
        """SHUTTINGDOWN → SHUTDOWN. Returns False (no-op) from any other state."""
        with self._lock:
            if self._state != ProcessingState.SHUTTINGDOWN:
                return False
            self._state = ProcessingState.SHUTDOWN
        logger.info("System is shut down.")
        self._notify(ProcessingState.SHUTDOWN)
        return True

    # ── Internals ───────────────────────────────────────────────

    def _transition(
        self,
        command: str,
        allowed_from: set[ProcessingState],
        target: ProcessingState,
        drain_queue: bool = False,
    ) -> ProcessingState:
        with self._lock:
            if self._state not in allowed_from:
                logger.warning(f"Rejected '{command}' in state {self._state.value}")
                raise InvalidTransition(command, self._state.value)
            previous = self._state
            self._state = target
            if target == ProcessingState.SHUTTINGDOWN:
                self._drain_queue = drain_queue

        logger.info(f"System state {previous.value} → {target.value}")
        self._notify(target)
        return target

    def _notify(self, state: ProcessingState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                # the transition has happened, a broken observer must not undo that
                logger.error(f"State listener {listener!r} failed on {state.value}: {e}", exc_info=True)
