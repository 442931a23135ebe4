"""
Pydantic schemas for the /control endpoints.

ControlStateUpdate: request body for changing the processing state.
ControlStateResponse: the current processing state.
"""

from pydantic import field_validator

from api.schemas.job import DefaultResponse, CamelModel
from models.enums import ControlCommand, ProcessingState

# The UI toggle sometimes sends the state it wants instead of a command
_TARGET_STATE_ALIASES = {
    ProcessingState.RUNNING.value: ControlCommand.RUN,
    ProcessingState.PAUSED.value: ControlCommand.PAUSE,
    ProcessingState.SHUTDOWN.value: ControlCommand.SHUTDOWN_IMMEDIATELY,
}


class ControlStateUpdate(CamelModel):
    """Request body for PUT /control/state."""

    state: ControlCommand  # RUN, PAUSE, SHUTDOWN_IMMEDIATELY, SHUTDOWN_PROCESS_QUEUE

    @field_validator("state", mode="before")
    @classmethod
    def resolve_target_state(cls, value):
        if isinstance(value, str):
            return _TARGET_STATE_ALIASES.get(value.upper(), value.upper())
        return value


class ControlStateResponse(DefaultResponse):
    message: str = "State retrieval successful."
    state: ProcessingState
