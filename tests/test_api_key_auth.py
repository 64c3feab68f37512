"""ApiKeyAuthenticator tests against an in-memory credential store.

Learn: The authenticator only talks to the CredentialStore protocol, so a
small dict-backed fake is enough to drive every outcome, including a
last-used write that fails.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from eventdesk.auth.api_key import ApiKeyAuthenticator
from eventdesk.db.models import ApiKey
from eventdesk.errors import (
    CredentialExpired,
    EndpointNotAllowed,
    InvalidCredential,
    MethodNotAllowed,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeStore:
    def __init__(self, fail_touch: bool = False):
        self.keys: dict[str, ApiKey] = {}
        self.touched: list[tuple[int, datetime]] = []
        self.fail_touch = fail_touch

    def add(self, raw_key: str, **fields) -> ApiKey:
        api_key = ApiKey(
            id=len(self.keys) + 1,
            user_id=fields.pop("user_id", 1),
            name="integration",
            key_hash="unused",
            prefix=raw_key[:10],
            is_active=fields.pop("is_active", True),
            created_at=NOW,
            **fields,
        )
        self.keys[raw_key] = api_key
        return api_key

    async def get_api_key_by_key(self, raw_key):
        return self.keys.get(raw_key)

    async def update_api_key_last_used(self, key_id, when):
        if self.fail_touch:
            raise OperationalError("UPDATE api_keys", {}, Exception("database is locked"))
        self.touched.append((key_id, when))
        for api_key in self.keys.values():
            if api_key.id == key_id:
                api_key.last_used_at = when


def _authenticator(store, now=NOW):
    return ApiKeyAuthenticator(store, clock=lambda: now)


# ═══════════════════════════════════════════════════════════
# Accepted keys
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_valid_key_resolves_owner_and_stamps_last_used():
    store = FakeStore()
    store.add("ed_good", user_id=7)

    grant = await _authenticator(store).authenticate("ed_good", "GET", "/api/events")

    assert grant.user_id == 7
    assert grant.rule.capability == "events:read"
    assert store.touched == [(grant.key_id, NOW)]
    assert store.keys["ed_good"].last_used_at == NOW


@pytest.mark.asyncio
async def test_last_used_advances_on_each_use():
    store = FakeStore()
    store.add("ed_good")

    await _authenticator(store, NOW).authenticate("ed_good", "GET", "/api/events")
    later = NOW + timedelta(minutes=5)
    await _authenticator(store, later).authenticate("ed_good", "GET", "/api/courses")

    assert store.keys["ed_good"].last_used_at == later


@pytest.mark.asyncio
async def test_key_without_expiry_never_expires():
    store = FakeStore()
    store.add("ed_forever", expires_at=None)
    far_future = NOW + timedelta(days=3650)

    grant = await _authenticator(store, far_future).authenticate("ed_forever", "GET", "/api/media")
    assert grant.key_id == 1


@pytest.mark.asyncio
async def test_key_is_valid_at_its_expiry_instant():
    store = FakeStore()
    store.add("ed_edge", expires_at=NOW)

    grant = await _authenticator(store, NOW).authenticate("ed_edge", "GET", "/api/events")
    assert grant.key_id == 1


@pytest.mark.asyncio
async def test_failed_last_used_write_does_not_fail_request():
    store = FakeStore(fail_touch=True)
    store.add("ed_good")

    grant = await _authenticator(store).authenticate("ed_good", "GET", "/api/events")
    assert grant.user_id == 1


# ═══════════════════════════════════════════════════════════
# Rejected keys
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_unknown_key_is_invalid():
    with pytest.raises(InvalidCredential) as exc:
        await _authenticator(FakeStore()).authenticate("ed_missing", "GET", "/api/events")
    assert exc.value.message == "Invalid API key"


@pytest.mark.asyncio
async def test_inactive_key_is_invalid():
    store = FakeStore()
    store.add("ed_off", is_active=False)

    with pytest.raises(InvalidCredential):
        await _authenticator(store).authenticate("ed_off", "GET", "/api/events")
    assert store.touched == []


@pytest.mark.asyncio
async def test_expired_key_is_reported_as_expired():
    store = FakeStore()
    store.add("ed_old", expires_at=NOW - timedelta(seconds=1))

    with pytest.raises(CredentialExpired) as exc:
        await _authenticator(store).authenticate("ed_old", "GET", "/api/events")
    assert exc.value.message == "API key expired"
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_expiry_wins_over_inactive():
    store = FakeStore()
    store.add("ed_both", is_active=False, expires_at=NOW - timedelta(days=1))

    with pytest.raises(CredentialExpired):
        await _authenticator(store).authenticate("ed_both", "GET", "/api/events")


@pytest.mark.asyncio
async def test_naive_expiry_is_treated_as_utc():
    """SQLite hands timestamps back without tzinfo."""
    store = FakeStore()
    store.add("ed_naive", expires_at=(NOW - timedelta(hours=1)).replace(tzinfo=None))

    with pytest.raises(CredentialExpired):
        await _authenticator(store).authenticate("ed_naive", "GET", "/api/events")


@pytest.mark.asyncio
async def test_out_of_scope_requests_do_not_touch_last_used():
    store = FakeStore()
    store.add("ed_good")
    auth = _authenticator(store)

    with pytest.raises(MethodNotAllowed):
        await auth.authenticate("ed_good", "DELETE", "/api/events/1")
    with pytest.raises(EndpointNotAllowed):
        await auth.authenticate("ed_good", "POST", "/api/events")

    assert store.touched == []
