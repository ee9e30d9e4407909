"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server ever answers with.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK                 - root, echo, user-agent, file read    │
    │  201   │ Created            - file written                         │
    │  404   │ Not Found          - unknown route, missing file          │
    │  500   │ Internal Server Error - a handler raised                  │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    CREATED = 201
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 200 OK
                     ─── ──
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx (success) status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
