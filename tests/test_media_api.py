"""Media metadata API tests."""

import pytest

VIDEO = {
    "title": "Welcome video",
    "mediaType": "video",
    "fileUrl": "/uploads/welcome.mp4",
    "fileName": "welcome.mp4",
    "fileSize": 1048576,
    "mimeType": "video/mp4",
}


@pytest.mark.asyncio
async def test_create_and_get_media(client, alice):
    r = await client.post("/api/media", json=VIDEO)
    assert r.status_code == 201
    media = r.json()["media"]
    assert media["uploadedBy"] == alice.id
    assert media["fileSize"] == 1048576
    assert media["createdAt"]

    fetched = await client.get(f"/api/media/{media['id']}")
    assert fetched.json()["media"]["title"] == "Welcome video"


@pytest.mark.asyncio
async def test_create_media_rejects_unknown_type(client):
    r = await client.post("/api/media", json={**VIDEO, "mediaType": "hologram"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_update_media_title_only(client):
    media = (await client.post("/api/media", json=VIDEO)).json()["media"]

    r = await client.put(f"/api/media/{media['id']}", json={"title": "Intro"})
    assert r.status_code == 200
    assert r.json()["media"]["title"] == "Intro"
    assert r.json()["media"]["fileUrl"] == "/uploads/welcome.mp4"


@pytest.mark.asyncio
async def test_list_and_delete_media(client):
    media = (await client.post("/api/media", json=VIDEO)).json()["media"]
    assert len((await client.get("/api/media")).json()["media"]) == 1

    r = await client.delete(f"/api/media/{media['id']}")
    assert r.json() == {"success": True}
    assert (await client.get(f"/api/media/{media['id']}")).status_code == 404
    assert (await client.delete(f"/api/media/{media['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_media_unlinks_from_courses(client):
    course = (
        await client.post(
            "/api/courses",
            json={"title": "Film club", "instructor": "J. Reel", "level": "intermediate"},
        )
    ).json()["course"]
    media = (await client.post("/api/media", json=VIDEO)).json()["media"]
    await client.post(f"/api/courses/{course['id']}/media/{media['id']}")

    await client.delete(f"/api/media/{media['id']}")
    assert (await client.get(f"/api/courses/{course['id']}/media")).json() == {"media": []}


@pytest.mark.asyncio
async def test_update_media_rejects_null_title(client):
    media = (await client.post("/api/media", json=VIDEO)).json()["media"]

    r = await client.put(f"/api/media/{media['id']}", json={"title": None})
    assert r.status_code == 422
    assert (await client.get(f"/api/media/{media['id']}")).json()["media"]["title"] == "Welcome video"
