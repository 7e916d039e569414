"""
=============================================================================
HTTP MESSAGE FACADES
=============================================================================

The data-shaping layer between a raw transport and application code.

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST FACADE (request.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ One lookup API over query, posted, cookie, server and env data      │
    │                                                                      │
    │   • params.py   ParameterResolver: overrides + ordered sources      │
    │   • headers.py  HeaderLookup: header name → server metadata key     │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE FACADE (response.py)                                       │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Assembles headers and body, sends them on send_response()           │
    │                                                                      │
    │   • header_collection.py   headers, status code, redirect flag      │
    │   • segments.py            named, re-orderable body segments        │
    │   • exception_ledger.py    captured errors                          │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SUPPORT                                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │   • transport.py     HeaderSink, BodyWriter, RawBodyReader,         │
    │                      IdGenerator (+ in-memory implementations)      │
    │   • status_codes.py  HTTPStatus, reason phrases, range checks       │
    │   • errors.py        FacadeError hierarchy                          │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .errors import FacadeError, UsageError, InvalidStatusCodeError, HeadersSentError
from .status_codes import HTTPStatus, is_valid_status, reason_phrase, status_line
from .transport import (
    HeaderSink,
    BodyWriter,
    HeaderLine,
    BufferedTransport,
    RawBodyReader,
    BytesBodyReader,
    StreamBodyReader,
    IdGenerator,
    UUIDGenerator,
)
from .params import ParameterResolver, ALL_SOURCES, DEFAULT_PARAM_SOURCES
from .headers import HeaderLookup, normalize_header_name, to_transport_key
from .segments import OrderedSegmentDocument
from .header_collection import HeaderCollection, HeaderEntry
from .exception_ledger import ExceptionLedger, ExceptionRecord
from .request import HTTPRequest
from .response import HTTPResponse

__all__ = [
    # Errors
    "FacadeError",
    "UsageError",
    "InvalidStatusCodeError",
    "HeadersSentError",

    # Status codes
    "HTTPStatus",
    "is_valid_status",
    "reason_phrase",
    "status_line",

    # Transport interfaces
    "HeaderSink",
    "BodyWriter",
    "HeaderLine",
    "BufferedTransport",
    "RawBodyReader",
    "BytesBodyReader",
    "StreamBodyReader",
    "IdGenerator",
    "UUIDGenerator",

    # Request side
    "ParameterResolver",
    "ALL_SOURCES",
    "DEFAULT_PARAM_SOURCES",
    "HeaderLookup",
    "normalize_header_name",
    "to_transport_key",
    "HTTPRequest",

    # Response side
    "OrderedSegmentDocument",
    "HeaderCollection",
    "HeaderEntry",
    "ExceptionLedger",
    "ExceptionRecord",
    "HTTPResponse",
]
