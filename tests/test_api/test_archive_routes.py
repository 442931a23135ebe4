"""API integration tests for the /archive endpoint."""

import pytest

DISPATCH = {
    "basePath": "/objects/1",
    "objectUid": "obj-1",
    "mediaUid": "media-1",
    "mimeType": "image/jpeg",
    "levels": ["Automatic"],
}


@pytest.mark.asyncio
async def test_empty_archive(client):
    response = await client.get("/archive/jobs")
    assert response.status_code == 200
    assert response.json()["items"] == []


@pytest.mark.asyncio
async def test_archive_is_newest_first(client):
    ids = []
    for _ in range(3):
        job_id = (await client.post("/jobs/dispatch", json=DISPATCH)).json()["id"]
        await client.delete(f"/jobs/cancel/{job_id}")
        ids.append(job_id)

    items = (await client.get("/archive/jobs")).json()["items"]
    assert [item["id"] for item in items] == list(reversed(ids))
    assert all(item["completedAt"] is not None for item in items)


@pytest.mark.asyncio
async def test_archive_paging(client):
    ids = []
    for _ in range(4):
        job_id = (await client.post("/jobs/dispatch", json=DISPATCH)).json()["id"]
        await client.delete(f"/jobs/cancel/{job_id}")
        ids.append(job_id)

    response = await client.get("/archive/jobs", params={"limit": 2, "offset": 1})
    assert [item["id"] for item in response.json()["items"]] == [ids[2], ids[1]]


@pytest.mark.asyncio
async def test_archive_limit_is_capped(client):
    response = await client.get("/archive/jobs", params={"limit": 100000})
    assert response.status_code == 422
