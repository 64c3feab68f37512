"""Error taxonomy shared by the auth core and the route handlers.

Every error carries the HTTP status it maps to and a client-safe message.
main.py registers one handler that renders them as ``{"error": message}``,
so routes and dependencies just raise.
"""


class EventdeskError(Exception):
    """Base class for errors that terminate a request with a JSON body."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ─── Authentication ──────────────────────────────────────


class InvalidCredential(EventdeskError):
    """Unknown user, wrong password, or unknown/inactive API key."""

    status_code = 401
    default_message = "Invalid credentials"


class CredentialExpired(EventdeskError):
    status_code = 401
    default_message = "API key expired"


class NotAuthenticated(EventdeskError):
    status_code = 401
    default_message = "Authentication required"


# ─── Authorization ───────────────────────────────────────


class MethodNotAllowed(EventdeskError):
    """API key is valid but its allow-list has no rules for this method."""

    status_code = 403
    default_message = "API key is valid but this HTTP method is not permitted for API key access"


class EndpointNotAllowed(EventdeskError):
    """API key is valid but the path is outside its allow-list."""

    status_code = 403
    default_message = "API key is valid but this endpoint is not permitted for API key access"


class NotAuthorized(EventdeskError):
    status_code = 403
    default_message = "Not authorized"


# ─── Resources ───────────────────────────────────────────


class NotFound(EventdeskError):
    status_code = 404
    default_message = "Not found"


class Conflict(EventdeskError):
    status_code = 409
    default_message = "Conflict"


class BadRequest(EventdeskError):
    status_code = 400
    default_message = "Bad request"
