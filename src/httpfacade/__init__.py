"""
=============================================================================
HTTPFACADE - REQUEST AND RESPONSE FACADES
=============================================================================

A data-shaping layer between a raw HTTP transport and application code.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Transport / environment                                            │
    │   (WSGI environ, socket server, test double)                        │
    │        │                                        ▲                    │
    │        │ query, posted, cookies,                │ HeaderSink         │
    │        │ server metadata, raw body              │ BodyWriter         │
    │        ▼                                        │                    │
    │   ┌──────────────┐                      ┌──────────────┐             │
    │   │ HTTPRequest  │ ──► application ───► │ HTTPResponse │             │
    │   └──────────────┘        code          └──────────────┘             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

No parsing of HTTP wire syntax, no sockets, no sessions: the transport
hands over data that is already split into maps, and takes back header
lines and body text.

=============================================================================
QUICK START
=============================================================================

    from httpfacade import HTTPRequest, HTTPResponse

    request = HTTPRequest.from_environ(environ)
    user_id = request.get_param("id", "anonymous")

    response = HTTPResponse()
    response.append("greeting", f"Hello {user_id}")
    response.send_response()

=============================================================================
"""

__version__ = "1.0.0"

from .config import FacadeConfig, configure_logging
from .http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    FacadeError,
    UsageError,
    InvalidStatusCodeError,
    HeadersSentError,
)

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "FacadeConfig",
    "configure_logging",
    "FacadeError",
    "UsageError",
    "InvalidStatusCodeError",
    "HeadersSentError",
    "__version__",
]
