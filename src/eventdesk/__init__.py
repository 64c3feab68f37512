"""eventdesk — events, courses and media management backend.

Serves the REST API behind the scheduling frontend: events and their
participant registrations, courses, media metadata and training sessions.
Browsers authenticate with a session cookie; integrations use API keys
restricted to a small read-mostly allow-list.
"""

__version__ = "0.1.0"
