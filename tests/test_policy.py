"""API-key allow-list tests.

Learn: The policy is a pure function of (method, path), so these run
without a database or an app.
"""

import pytest

from eventdesk.auth.policy import API_KEY_RULES, check_access, match_rule
from eventdesk.errors import EndpointNotAllowed, MethodNotAllowed


@pytest.mark.parametrize(
    "path",
    [
        "/api/events",
        "/api/events/7",
        "/api/events/7/participants",
        "/api/events/shared/abc123",
        "/api/courses",
        "/api/courses/3/media",
        "/api/media/12",
        "/api/training-sessions/month/2026/10",
        "/api/user",
    ],
)
def test_reads_are_allowed(path):
    assert match_rule("GET", path) is not None


def test_participant_registration_is_the_only_write():
    rule = check_access("POST", "/api/events/42/participants")
    assert rule.capability == "participants:register"
    assert {r.method for r in API_KEY_RULES} == {"GET", "POST"}


def test_method_is_case_insensitive():
    assert match_rule("get", "/api/events") is not None


def test_trailing_slash_is_ignored():
    assert match_rule("GET", "/api/events/") is not None


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH"])
def test_methods_without_rules_are_refused(method):
    with pytest.raises(MethodNotAllowed):
        check_access(method, "/api/events/1")


@pytest.mark.parametrize(
    "path",
    [
        "/api/events",
        "/api/courses/1/participants",
        "/api/keys",
        "/api/login",
        "/api/events/abc/participants",
    ],
)
def test_posts_outside_registration_are_refused(path):
    with pytest.raises(EndpointNotAllowed):
        check_access("POST", path)


@pytest.mark.parametrize("path", ["/api/keys", "/api/users", "/api/eventsx"])
def test_reads_outside_the_list_are_refused(path):
    with pytest.raises(EndpointNotAllowed):
        check_access("GET", path)


def test_refusal_message_names_the_request():
    with pytest.raises(EndpointNotAllowed) as exc:
        check_access("GET", "/api/keys")
    assert "GET /api/keys" in exc.value.message
    assert exc.value.status_code == 403
