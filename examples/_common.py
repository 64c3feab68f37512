"""
Shared helpers for eventdesk examples.

Handles the health check and the session login so each example can
focus on its specific workflow.
"""

import os
import sys

import httpx

BASE = os.environ.get("EVENTDESK_URL", "http://localhost:8000")


def check_backend() -> None:
    """Verify the backend is reachable and its database is up."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  uvicorn eventdesk.main:app --reload --port 8000")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")
    print(f"  Version:  {health['version']}")

    if health["status"] != "healthy":
        print(f"\nERROR: Database check failed: {health['database']}")
        sys.exit(1)


def create_session_client() -> httpx.Client:
    """Check backend, log in, and return a Client carrying the session cookie.

    Credentials come from EVENTDESK_USERNAME / EVENTDESK_PASSWORD, which
    default to the bootstrap admin most local setups configure.
    """
    check_backend()
    client = httpx.Client(base_url=f"{BASE}/api", timeout=10)
    resp = client.post(
        "/login",
        json={
            "username": os.environ.get("EVENTDESK_USERNAME", "admin"),
            "password": os.environ.get("EVENTDESK_PASSWORD", "admin-password"),
        },
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    print(f"  Auth:     ✓ (session as {resp.json()['user']['username']})")
    return client


def create_key_client(raw_key: str) -> httpx.Client:
    """A Client that authenticates with an API key only (no cookies)."""
    return httpx.Client(
        base_url=f"{BASE}/api",
        timeout=10,
        headers={"X-API-Key": raw_key},
    )
