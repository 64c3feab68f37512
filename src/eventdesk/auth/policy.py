"""API-key access policy — which requests an API key may make.

API keys are for low-privilege, read-mostly integrations plus one write
path: registering a participant for an event. Rather than sprinkling
checks through the routes, the whole policy is this ordered rule table.
Session-authenticated requests never pass through it.

A method with no rules at all is refused outright (MethodNotAllowed);
a method that has rules but none matching the path is refused as an
endpoint outside the key's scope (EndpointNotAllowed).
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from eventdesk.errors import EndpointNotAllowed, MethodNotAllowed


@dataclass(frozen=True)
class AccessRule:
    """One allow-list entry: an HTTP method, a path regex, and what it grants."""

    method: str
    pattern: re.Pattern
    capability: str

    def matches(self, method: str, path: str) -> bool:
        return self.method == method and self.pattern.fullmatch(path) is not None


def _rule(method: str, pattern: str, capability: str) -> AccessRule:
    return AccessRule(method=method, pattern=re.compile(pattern), capability=capability)


API_KEY_RULES: tuple[AccessRule, ...] = (
    _rule("GET", r"/api/events(/.*)?", "events:read"),
    _rule("GET", r"/api/courses(/.*)?", "courses:read"),
    _rule("GET", r"/api/media(/.*)?", "media:read"),
    _rule("GET", r"/api/training-sessions(/.*)?", "training-sessions:read"),
    _rule("GET", r"/api/user", "identity:read"),
    _rule("POST", r"/api/events/\d+/participants", "participants:register"),
)


def match_rule(
    method: str, path: str, rules: Iterable[AccessRule] = API_KEY_RULES
) -> Optional[AccessRule]:
    """Return the first rule permitting (method, path), or None."""
    method = method.upper()
    path = path.rstrip("/") or "/"
    for rule in rules:
        if rule.matches(method, path):
            return rule
    return None


def check_access(
    method: str, path: str, rules: Iterable[AccessRule] = API_KEY_RULES
) -> AccessRule:
    """Return the rule permitting (method, path); raise if there is none."""
    rules = tuple(rules)
    rule = match_rule(method, path, rules)
    if rule is not None:
        return rule
    if not any(r.method == method.upper() for r in rules):
        raise MethodNotAllowed(
            f"API key is valid but {method.upper()} requests are not permitted "
            "with API key authentication"
        )
    raise EndpointNotAllowed(
        f"API key is valid but {method.upper()} {path} is not permitted "
        "with API key authentication"
    )
