"""
Processing control endpoints.

GET /control/state → current processing state
PUT /control/state → RUN / PAUSE / SHUTDOWN_IMMEDIATELY / SHUTDOWN_PROCESS_QUEUE

The transition table lives in control/state_machine.py. A command that is
not allowed from the current state returns 409 and changes nothing.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_state_machine, require_whitelisted
from api.schemas.control import ControlStateResponse, ControlStateUpdate
from control.state_machine import ProcessingStateMachine
from models.errors import InvalidTransition

router = APIRouter(prefix="/control", tags=["control"], dependencies=[Depends(require_whitelisted)])


@router.get("/state", response_model=ControlStateResponse)
async def get_state(
    state_machine: ProcessingStateMachine = Depends(get_state_machine),
) -> ControlStateResponse:
    return ControlStateResponse(state=state_machine.state)


@router.put("/state", response_model=ControlStateResponse)
def update_state(
    update: ControlStateUpdate,
    state_machine: ProcessingStateMachine = Depends(get_state_machine),
) -> ControlStateResponse:
    try:
        state_machine.apply_command(update.state)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    # a shutdown with nothing in flight may have gone straight to SHUTDOWN
    return ControlStateResponse(
        message=f"System state updated to {update.state.value}",
        state=state_machine.state,
    )
