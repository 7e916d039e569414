"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every error raised by httpfacade derives from FacadeError, so callers can
catch the whole family with one clause.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ERROR HIERARCHY                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   FacadeError                                                        │
    │    ├── UsageError (also a ValueError)                                │
    │    │    └── InvalidStatusCodeError                                   │
    │    └── HeadersSentError                                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    UsageError              Bad argument shape at the call site. The caller
                            can fix the call and carry on.

    InvalidStatusCodeError  Status code outside 100-599. The mutation is
                            rejected and the previous code is kept.

    HeadersSentError        The transport already committed its headers.
                            Nothing more can be sent on this response.

Lookups that find nothing never raise: they return a default value.

=============================================================================
"""

from typing import Any, Optional


class FacadeError(Exception):
    """Base class for all httpfacade errors."""


class UsageError(FacadeError, ValueError):
    """
    Raised when an operation is called with arguments of the wrong shape.

    Examples:
        - set_query(42) with no value (needs a mapping or key/value pair)
        - get_header("") (a header name is required)
        - a non-string body segment name
    """


class InvalidStatusCodeError(UsageError):
    """Raised when a status code is not an integer in [100, 599]."""

    def __init__(self, status_code: Any):
        super().__init__(f"Invalid HTTP response code: {status_code!r}")
        self.status_code = status_code  # The rejected value


class HeadersSentError(FacadeError):
    """
    Raised when headers are mutated or sent after the transport committed them.

    The commit is a one-way latch: once the first byte of the body is on
    the wire, the status line and headers can no longer change.
    """

    def __init__(self, location: Optional[str] = None):
        where = location or "unknown location"
        super().__init__(f"Cannot send headers; headers already sent in {where}")
        self.location = location  # "file, line N" where output started
