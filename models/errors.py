"""
Exception taxonomy shared by the queue, the settings store and the state machine.

None of these is fatal to the process. Every mutation that raises one of
them leaves the previous state untouched, and the API layer turns each
into a structured HTTP response (see api/routers/).
"""


class CompressionControlError(Exception):
    """Base class for all recoverable control-plane errors."""


class ValidationError(CompressionControlError):
    """
    Malformed or invariant-violating input (job request or configuration).

    `errors` carries field-level detail: [{"field": ..., "message": ...}, ...]
    """

    def __init__(self, errors: list[dict], message: str = "Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}], message)


class AdmissionError(CompressionControlError):
    """A valid dispatch request that the queue cannot accept right now."""


class CapacityExceeded(AdmissionError):
    def __init__(self, max_length: int):
        super().__init__(f"Queue is full (queueMaxLength={max_length})")
        self.max_length = max_length


class ProcessingUnavailable(AdmissionError):
    def __init__(self, state: str):
        super().__init__(f"Queue is closed, system state is {state}")
        self.state = state


class InvalidTransition(CompressionControlError):
    def __init__(self, command: str, state: str):
        super().__init__(
            f"System state update illegal: cannot {command} while {state}"
        )
        self.command = command
        self.state = state


class WorkerFailure(CompressionControlError):
    """Raised by compression handlers; recorded as a FAILED job, never retried."""
