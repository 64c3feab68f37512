"""API-key authentication.

Decides, per request, whether a presented X-API-Key grants access:

1. Unknown token → InvalidCredential
2. Past expires_at → CredentialExpired (even if the key is also inactive)
3. Inactive → InvalidCredential
4. (method, path) outside the allow-list → MethodNotAllowed / EndpointNotAllowed
5. Otherwise record last_used_at and return the owning user id

Having no key at all is not this module's concern; the resolver only
calls in when the header is present.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

import structlog
from sqlalchemy.exc import SQLAlchemyError

from eventdesk.auth.policy import API_KEY_RULES, AccessRule, check_access
from eventdesk.errors import (
    CredentialExpired,
    EndpointNotAllowed,
    InvalidCredential,
    MethodNotAllowed,
)
from eventdesk.services.credential_store import CredentialStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class ApiKeyGrant:
    """Outcome of a successful API-key check."""

    key_id: int
    user_id: int
    rule: AccessRule


class ApiKeyAuthenticator:
    """Validates API keys against the credential store and the allow-list."""

    def __init__(
        self,
        store: CredentialStore,
        clock: Callable[[], datetime],
        rules: tuple[AccessRule, ...] = API_KEY_RULES,
    ):
        self.store = store
        self.clock = clock
        self.rules = rules

    async def authenticate(self, raw_key: str, method: str, path: str) -> ApiKeyGrant:
        api_key = await self.store.get_api_key_by_key(raw_key)
        if not api_key:
            logger.info("auth.api_key_rejected", reason="unknown", path=path)
            raise InvalidCredential("Invalid API key")

        now = self.clock()
        if api_key.is_expired(now):
            logger.info("auth.api_key_rejected", reason="expired", key_id=api_key.id)
            raise CredentialExpired("API key expired")

        if not api_key.is_active:
            logger.info("auth.api_key_rejected", reason="inactive", key_id=api_key.id)
            raise InvalidCredential("Invalid API key")

        try:
            rule = check_access(method, path, self.rules)
        except (MethodNotAllowed, EndpointNotAllowed):
            logger.info(
                "auth.api_key_out_of_scope",
                key_id=api_key.id,
                method=method,
                path=path,
            )
            raise

        grant = ApiKeyGrant(key_id=api_key.id, user_id=api_key.user_id, rule=rule)
        await self._record_use(api_key.id, now)
        return grant

    async def _record_use(self, key_id: int, now: datetime) -> None:
        """Stamp last_used_at. A failed write never fails the request."""
        try:
            await self.store.update_api_key_last_used(key_id, now)
        except SQLAlchemyError as e:
            logger.warning("auth.api_key_touch_failed", key_id=key_id, error=str(e))
