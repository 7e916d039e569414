"""
=============================================================================
HTTP STATUS CODES (RFC 7231)
=============================================================================

Status codes with reason phrases, plus the range checks the response side
uses when a code is set.

A response may carry ANY integer in [100, 599], not only the codes listed
in HTTPStatus. Unlisted codes are valid; they just have no reason phrase.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  1xx   │ Informational                                             │
    │  2xx   │ Success                                                   │
    │  3xx   │ Redirection   (300-307 flag the response as a redirect)   │
    │  4xx   │ Client error                                              │
    │  5xx   │ Server error                                              │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum
from typing import Any


MIN_STATUS = 100
MAX_STATUS = 599

# Codes in this range mark a response as a redirect when set (308 does not).
REDIRECT_MIN = 300
REDIRECT_MAX = 307


class HTTPStatus(IntEnum):
    """
    Common HTTP status codes.

    IntEnum members compare equal to plain integers:

        >>> HTTPStatus.FOUND == 302
        True
        >>> HTTPStatus.FOUND.phrase
        'Found'
    """

    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206

    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    USE_PROXY = 305
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    GONE = 410
    PAYLOAD_TOO_LARGE = 413
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504

    @property
    def phrase(self) -> str:
        """Reason phrase used on the status line ("Not Found" for 404)."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_redirect(self) -> bool:
        """Check if this code sets the response redirect flag."""
        return is_redirect_status(self)


def is_valid_status(code: Any) -> bool:
    """
    Check that `code` is an integer HTTP status in [100, 599].

    bool is rejected even though it subclasses int: True is not a status.
    """
    if isinstance(code, bool) or not isinstance(code, int):
        return False
    return MIN_STATUS <= code <= MAX_STATUS


def is_redirect_status(code: int) -> bool:
    """Check if `code` falls in the redirect range [300, 307]."""
    return REDIRECT_MIN <= code <= REDIRECT_MAX


def reason_phrase(code: int) -> str:
    """
    Get the reason phrase for any code, or "" if it has none.

    Example:
        reason_phrase(404)  # "Not Found"
        reason_phrase(299)  # ""
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def status_line(code: int, version: str = "HTTP/1.1") -> str:
    """
    Build a status line: "HTTP/1.1 303 See Other".

    Codes without a known phrase produce "HTTP/1.1 299".
    """
    phrase = reason_phrase(code)
    return f"{version} {code} {phrase}" if phrase else f"{version} {code}"


_STATUS_PHRASES = {
    HTTPStatus.CONTINUE: "Continue",
    HTTPStatus.SWITCHING_PROTOCOLS: "Switching Protocols",
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",
    HTTPStatus.MULTIPLE_CHOICES: "Multiple Choices",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.USE_PROXY: "Use Proxy",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.GONE: "Gone",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
}
