"""API integration tests for the /control endpoints."""

import pytest


@pytest.mark.asyncio
async def test_autostart_puts_system_in_running(client):
    """Default configuration has autostart on."""
    response = await client.get("/control/state")
    assert response.status_code == 200
    assert response.json()["state"] == "RUNNING"


@pytest.mark.asyncio
async def test_pause_and_resume(client):
    response = await client.put("/control/state", json={"state": "PAUSE"})
    assert response.status_code == 200
    assert response.json()["state"] == "PAUSED"

    response = await client.put("/control/state", json={"state": "RUN"})
    assert response.json()["state"] == "RUNNING"


@pytest.mark.asyncio
async def test_target_state_aliases(client):
    """The toggle may send the state it wants instead of a command."""
    response = await client.put("/control/state", json={"state": "paused"})
    assert response.status_code == 200
    assert response.json()["state"] == "PAUSED"


@pytest.mark.asyncio
async def test_illegal_transition_returns_409(client):
    response = await client.put("/control/state", json={"state": "RUN"})

    assert response.status_code == 409
    assert "cannot start while RUNNING" in response.json()["detail"]
    assert (await client.get("/control/state")).json()["state"] == "RUNNING"


@pytest.mark.asyncio
async def test_unknown_command_is_rejected(client):
    response = await client.put("/control/state", json={"state": "EXPLODE"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_shutdown_with_nothing_in_flight(client):
    response = await client.put("/control/state", json={"state": "SHUTDOWN_IMMEDIATELY"})

    assert response.status_code == 200
    assert response.json()["state"] == "SHUTDOWN"

    response = await client.put("/control/state", json={"state": "RUN"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_shutdown_waits_for_processing_job(client, app):
    await client.post("/jobs/dispatch", json={
        "basePath": "/objects/1",
        "objectUid": "o",
        "mediaUid": "m",
        "mimeType": "image/png",
    })
    app.state.job_queue.next_for_worker()

    response = await client.put("/control/state", json={"state": "SHUTDOWN_PROCESS_QUEUE"})
    assert response.json()["state"] == "SHUTTINGDOWN"


@pytest.mark.asyncio
async def test_failing_state_listener_still_answers_200(app, client):
    def broken(state):
        raise RuntimeError("observer crashed")

    app.state.state_machine.add_listener(broken)

    response = await client.put("/control/state", json={"state": "PAUSE"})

    assert response.status_code == 200
    assert response.json()["state"] == "PAUSED"
