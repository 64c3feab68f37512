#!/usr/bin/env python3
"""
eventdesk Quickstart — an integration's view of the API.

Logs in → creates an event → mints an API key → uses the key the way a
website signup form would (read events, register a participant) → shows
what the key is NOT allowed to do → cleans up.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8000
"""

import uuid

from _common import create_key_client, create_session_client


def main():
    run_id = uuid.uuid4().hex[:6]
    client = create_session_client()

    # ── Create event ──────────────────────────────────────────────
    print("\n1. Creating event...")
    resp = client.post("/events", json={
        "title": f"Open Day {run_id}",
        "location": "Main hall",
        "startDate": "2026-11-14T09:00:00Z",
        "endDate": "2026-11-14T16:00:00Z",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    event = resp.json()["event"]
    print(f"   Event: {event['title']} (#{event['id']})")

    # ── Mint an API key (shown once) ──────────────────────────────
    print("\n2. Creating API key (expires in 7 days)...")
    resp = client.post("/keys", json={"name": f"signup-form-{run_id}", "expiryDays": 7})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    created = resp.json()["apiKey"]
    print(f"   Key:     {created['key'][:10]}... (store it now, it is not shown again)")
    print(f"   Expires: {created['expiresAt']}")

    # ── Use the key like an integration would ─────────────────────
    integration = create_key_client(created["key"])

    print("\n3. Reading with the API key...")
    resp = integration.get("/user")
    print(f"   /user → {resp.json()['user']['username']} via {resp.json()['auth_method']}")
    resp = integration.get("/events")
    print(f"   /events → {len(resp.json()['events'])} event(s)")

    print("\n4. Registering a participant with the API key...")
    resp = integration.post(f"/events/{event['id']}/participants", json={
        "name": "Pat Example",
        "email": f"pat-{run_id}@example.com",
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    print(f"   Participant #{resp.json()['participant']['id']} registered")

    # ── What the key cannot do ────────────────────────────────────
    print("\n5. Trying writes outside the key's allow-list...")
    resp = integration.put(f"/events/{event['id']}", json={"title": "Changed"})
    print(f"   PUT /events/{event['id']} → {resp.status_code} {resp.json()['error']}")
    resp = integration.get("/keys")
    print(f"   GET /keys → {resp.status_code} {resp.json()['error']}")

    # ── Last-used tracking ────────────────────────────────────────
    keys = client.get("/keys").json()["apiKeys"]
    mine = next(k for k in keys if k["id"] == created["id"])
    print(f"\n6. Key last used at: {mine['lastUsedAt']}")

    # ── Clean up ──────────────────────────────────────────────────
    print("\n7. Deactivating and deleting the key...")
    client.put(f"/keys/{created['id']}/toggle", json={"isActive": False})
    resp = integration.get("/events")
    print(f"   Inactive key → {resp.status_code} {resp.json()['error']}")
    client.delete(f"/keys/{created['id']}")
    client.delete(f"/events/{event['id']}")

    print("\n✓ Quickstart complete.")


if __name__ == "__main__":
    main()
