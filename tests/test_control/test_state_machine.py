"""
Tests for the ProcessingStateMachine.

Every (state, command) pair is checked against the transition table:
legal commands move the state, illegal ones raise and change nothing.
"""

import logging

import pytest

from control.state_machine import ProcessingStateMachine
from models.enums import ControlCommand, ProcessingState
from models.errors import InvalidTransition


def _machine_in(state: ProcessingState) -> ProcessingStateMachine:
    machine = ProcessingStateMachine()
    if state == ProcessingState.STARTUP:
        return machine
    if state == ProcessingState.RUNNING:
        machine.start()
    elif state == ProcessingState.PAUSED:
        machine.start()
        machine.pause()
    elif state == ProcessingState.SHUTTINGDOWN:
        machine.shutdown()
    elif state == ProcessingState.SHUTDOWN:
        machine.shutdown()
        machine.finish_shutdown()
    assert machine.state == state
    return machine


def test_initial_state_is_startup():
    assert ProcessingStateMachine().state == ProcessingState.STARTUP


LEGAL = [
    (ProcessingState.STARTUP, ControlCommand.RUN, ProcessingState.RUNNING),
    (ProcessingState.PAUSED, ControlCommand.RUN, ProcessingState.RUNNING),
    (ProcessingState.RUNNING, ControlCommand.PAUSE, ProcessingState.PAUSED),
    (ProcessingState.STARTUP, ControlCommand.SHUTDOWN_IMMEDIATELY, ProcessingState.SHUTTINGDOWN),
    (ProcessingState.RUNNING, ControlCommand.SHUTDOWN_IMMEDIATELY, ProcessingState.SHUTTINGDOWN),
    (ProcessingState.PAUSED, ControlCommand.SHUTDOWN_IMMEDIATELY, ProcessingState.SHUTTINGDOWN),
    (ProcessingState.RUNNING, ControlCommand.SHUTDOWN_PROCESS_QUEUE, ProcessingState.SHUTTINGDOWN),
]


@pytest.mark.parametrize("start, command, expected", LEGAL)
def test_legal_transitions(start, command, expected):
    machine = _machine_in(start)
    assert machine.apply_command(command) == expected
    assert machine.state == expected


ILLEGAL = [
    (ProcessingState.RUNNING, ControlCommand.RUN),
    (ProcessingState.STARTUP, ControlCommand.PAUSE),
    (ProcessingState.PAUSED, ControlCommand.PAUSE),
    (ProcessingState.SHUTTINGDOWN, ControlCommand.RUN),
    (ProcessingState.SHUTTINGDOWN, ControlCommand.PAUSE),
    (ProcessingState.SHUTTINGDOWN, ControlCommand.SHUTDOWN_IMMEDIATELY),
    (ProcessingState.SHUTDOWN, ControlCommand.RUN),
    (ProcessingState.SHUTDOWN, ControlCommand.PAUSE),
    (ProcessingState.SHUTDOWN, ControlCommand.SHUTDOWN_PROCESS_QUEUE),
]


@pytest.mark.parametrize("start, command", ILLEGAL)
def test_illegal_transitions_leave_state_unchanged(start, command):
    machine = _machine_in(start)
    with pytest.raises(InvalidTransition):
        machine.apply_command(command)
    assert machine.state == start


def test_invalid_transition_message():
    machine = _machine_in(ProcessingState.STARTUP)
    with pytest.raises(InvalidTransition, match="cannot pause while STARTUP"):
        machine.pause()


def test_drain_queue_flag():
    machine = _machine_in(ProcessingState.RUNNING)
    machine.shutdown(drain_queue=True)
    assert machine.drain_queue is True

    immediate = _machine_in(ProcessingState.RUNNING)
    immediate.shutdown()
    assert immediate.drain_queue is False


def test_finish_shutdown_only_from_shuttingdown():
    machine = _machine_in(ProcessingState.RUNNING)
    assert machine.finish_shutdown() is False
    assert machine.state == ProcessingState.RUNNING

    machine.shutdown()
    assert machine.finish_shutdown() is True
    assert machine.state == ProcessingState.SHUTDOWN
    assert machine.finish_shutdown() is False


def test_listeners_see_every_transition():
    machine = ProcessingStateMachine()
    seen = []
    machine.add_listener(seen.append)

    machine.start()
    machine.pause()
    machine.shutdown()
    machine.finish_shutdown()

    assert seen == [
        ProcessingState.RUNNING,
        ProcessingState.PAUSED,
        ProcessingState.SHUTTINGDOWN,
        ProcessingState.SHUTDOWN,
    ]


def test_listener_not_called_on_rejected_command():
    machine = ProcessingStateMachine()
    seen = []
    machine.add_listener(seen.append)

    with pytest.raises(InvalidTransition):
        machine.pause()
    assert seen == []


def test_failing_listener_does_not_break_transition(caplog):
    machine = ProcessingStateMachine()
    seen = []

    def broken(state):
        raise RuntimeError("observer crashed")

    machine.add_listener(broken)
    machine.add_listener(seen.append)

    with caplog.at_level(logging.ERROR, logger="control.state_machine"):
        assert machine.start() == ProcessingState.RUNNING

    assert machine.state == ProcessingState.RUNNING
    assert seen == [ProcessingState.RUNNING]
    assert "observer crashed" in caplog.text


def test_hold_yields_current_state():
    machine = _machine_in(ProcessingState.RUNNING)
    with machine.hold() as state:
        assert state == ProcessingState.RUNNING
