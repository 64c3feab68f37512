"""Event and event participant API tests."""

from datetime import datetime, timezone

import pytest

from eventdesk.services.event_service import EventService

EVENT = {
    "title": "Spring Open Day",
    "description": "Tours and demos",
    "location": "Main hall",
    "startDate": "2026-04-10T09:00:00Z",
    "endDate": "2026-04-10T16:00:00Z",
}


async def _create_event(client, **overrides):
    r = await client.post("/api/events", json={**EVENT, **overrides})
    assert r.status_code == 201, r.text
    return r.json()["event"]


# ═══════════════════════════════════════════════════════════
# Events
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_event(client, alice):
    event = await _create_event(client)
    assert event["title"] == "Spring Open Day"
    assert event["creatorId"] == alice.id
    assert event["isShared"] is False
    assert event["shareToken"] is None


@pytest.mark.asyncio
async def test_create_event_end_before_start(client):
    r = await client.post(
        "/api/events",
        json={**EVENT, "endDate": "2026-04-09T09:00:00Z"},
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_events_ordered_by_start(client):
    await _create_event(client, title="Later", startDate="2026-06-01T09:00:00Z", endDate="2026-06-01T10:00:00Z")
    await _create_event(client, title="Sooner", startDate="2026-05-01T09:00:00Z", endDate="2026-05-01T10:00:00Z")

    r = await client.get("/api/events")
    assert [e["title"] for e in r.json()["events"]] == ["Sooner", "Later"]


@pytest.mark.asyncio
async def test_get_event_not_found(client):
    r = await client.get("/api/events/999")
    assert r.status_code == 404
    assert r.json() == {"error": "Event not found"}


@pytest.mark.asyncio
async def test_update_event(client):
    event = await _create_event(client)
    r = await client.put(f"/api/events/{event['id']}", json={"title": "Renamed"})
    assert r.status_code == 200
    assert r.json()["event"]["title"] == "Renamed"
    assert r.json()["event"]["location"] == "Main hall"


@pytest.mark.asyncio
async def test_update_event_rejects_inverted_dates(client):
    event = await _create_event(client)
    r = await client.put(
        f"/api/events/{event['id']}", json={"endDate": "2026-04-01T00:00:00Z"}
    )
    assert r.status_code == 400
    assert r.json() == {"error": "End date must be after start date"}


@pytest.mark.asyncio
async def test_delete_event_removes_participants(client):
    event = await _create_event(client)
    await client.post(
        f"/api/events/{event['id']}/participants",
        json={"name": "Sam", "email": "sam@example.com"},
    )

    r = await client.delete(f"/api/events/{event['id']}")
    assert r.status_code == 200
    assert (await client.get(f"/api/events/{event['id']}")).status_code == 404
    participants = await client.get(f"/api/events/{event['id']}/participants")
    assert participants.json() == {"participants": []}


# ═══════════════════════════════════════════════════════════
# Sharing
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_share_event_publicly(client):
    event = await _create_event(client)

    r = await client.put(f"/api/events/{event['id']}/share", json={"isShared": True})
    shared = r.json()["event"]
    assert shared["isShared"] is True
    token = shared["shareToken"]
    assert shared["shareUrl"] == f"/events/shared/{token}"

    public = await client.get(f"/api/events/shared/{token}")
    assert public.status_code == 200
    assert public.json()["event"]["id"] == event["id"]


@pytest.mark.asyncio
async def test_shared_event_needs_no_login(unauthenticated_client, alice, db_session):
    svc = EventService(db_session)
    event = await svc.create_event(
        title="Public talk",
        start_date=datetime(2026, 5, 1, 18, tzinfo=timezone.utc),
        end_date=datetime(2026, 5, 1, 20, tzinfo=timezone.utc),
        creator_id=alice.id,
    )
    shared = await svc.set_sharing(event.id, True)

    r = await unauthenticated_client.get(f"/api/events/shared/{shared.share_token}")
    assert r.status_code == 200
    assert r.json()["event"]["title"] == "Public talk"


@pytest.mark.asyncio
async def test_unsharing_keeps_token_but_hides_event(client):
    event = await _create_event(client)
    on = (await client.put(f"/api/events/{event['id']}/share", json={"isShared": True})).json()
    token = on["event"]["shareToken"]

    await client.put(f"/api/events/{event['id']}/share", json={"isShared": False})
    assert (await client.get(f"/api/events/shared/{token}")).status_code == 404

    again = await client.put(f"/api/events/{event['id']}/share", json={"isShared": True})
    assert again.json()["event"]["shareToken"] == token


# ═══════════════════════════════════════════════════════════
# Participants
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_and_list_participants(client):
    event = await _create_event(client)
    r = await client.post(
        f"/api/events/{event['id']}/participants",
        json={"name": "Ana", "email": "ana@example.com", "phone": "555-0100"},
    )
    assert r.status_code == 201
    participant = r.json()["participant"]
    assert participant["attended"] is False
    assert participant["phone"] == "555-0100"

    listed = await client.get(f"/api/events/{event['id']}/participants")
    assert [p["email"] for p in listed.json()["participants"]] == ["ana@example.com"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    event = await _create_event(client)
    body = {"name": "Ana", "email": "ana@example.com"}
    await client.post(f"/api/events/{event['id']}/participants", json=body)

    r = await client.post(f"/api/events/{event['id']}/participants", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "This email is already registered for this event"}


@pytest.mark.asyncio
async def test_register_for_missing_event(client):
    r = await client.post(
        "/api/events/999/participants",
        json={"name": "Ana", "email": "ana@example.com"},
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_mark_attendance_and_remove(client):
    event = await _create_event(client)
    participant = (
        await client.post(
            f"/api/events/{event['id']}/participants",
            json={"name": "Ana", "email": "ana@example.com"},
        )
    ).json()["participant"]

    r = await client.put(
        f"/api/events/participants/{participant['id']}/attendance",
        json={"attended": True},
    )
    assert r.status_code == 200
    assert r.json()["participant"]["attended"] is True

    d = await client.delete(f"/api/events/participants/{participant['id']}")
    assert d.json() == {"success": True}
    missing = await client.delete(f"/api/events/participants/{participant['id']}")
    assert missing.status_code == 404


# ═══════════════════════════════════════════════════════════
# Input edge cases
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_naive_dates_are_read_as_utc(client):
    """A start without an offset and an end with one still compare."""
    r = await client.post(
        "/api/events",
        json={**EVENT, "startDate": "2026-01-01T00:00:00", "endDate": "2026-01-01T01:00:00Z"},
    )
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_mixed_offsets_end_before_start(client):
    r = await client.post(
        "/api/events",
        json={**EVENT, "startDate": "2026-01-01T02:00:00", "endDate": "2026-01-01T01:00:00Z"},
    )
    assert r.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "startDate", "endDate"])
async def test_update_event_rejects_null_required_field(client, field):
    event = await _create_event(client)

    r = await client.put(f"/api/events/{event['id']}", json={field: None})
    assert r.status_code == 422

    unchanged = (await client.get(f"/api/events/{event['id']}")).json()["event"]
    assert unchanged["title"] == "Spring Open Day"
    assert unchanged["startDate"] is not None


@pytest.mark.asyncio
async def test_update_event_can_clear_optional_field(client):
    event = await _create_event(client)

    r = await client.put(f"/api/events/{event['id']}", json={"location": None})
    assert r.status_code == 200
    assert r.json()["event"]["location"] is None
