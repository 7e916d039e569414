"""
=============================================================================
RESPONSE HEADER COLLECTION
=============================================================================

Collects response headers and the status code, then emits them to the
transport in one go when the response is sent.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        HEADER STATE                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   _raw_headers   ["Location: /login", ...]    unparsed lines         │
    │   _headers       [HeaderEntry("X-Foo", "1", replace=False), ...]     │
    │   _status        200                                                 │
    │   _is_redirect   False                                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REPLACE VS APPEND
=============================================================================

Some headers may legally repeat (Set-Cookie), others must not (Location).

    set_header("Set-Cookie", "a=1")
    set_header("Set-Cookie", "b=2")              → two entries

    set_header("X-Foo", "1")
    set_header("x_foo", "2", replace=True)       → one entry: X-Foo: 2

Names are normalized first, so "x_foo", "X-FOO" and "X-Foo" are the same
header.

=============================================================================
SEND ORDER
=============================================================================

    1. Raw headers, in the order they were set
    2. Structured headers, in the order they were set
    3. A bare status line, only if no header above carried the code

The status code rides along with the FIRST line emitted, whichever kind
it is. If nothing is pending and the code is still 200, send() does
nothing at all, so it cannot trip the "headers already sent" check.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from .errors import HeadersSentError, InvalidStatusCodeError
from .headers import normalize_header_name
from .status_codes import HTTPStatus, is_redirect_status, is_valid_status, status_line
from .transport import HeaderSink


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderEntry:
    """One structured response header."""

    name: str       # Canonical name, e.g. "Content-Type"
    value: str
    replace: bool = False

    @property
    def line(self) -> str:
        return f"{self.name}: {self.value}"


class HeaderCollection:
    """
    Ordered response headers with deferred emission.

    Args:
        sink: Transport the headers are emitted to. Also answers whether
              headers were already committed.
        headers_sent_throws: When False, mutations after commit are only
                             logged instead of raising HeadersSentError.
    """

    def __init__(self, sink: HeaderSink, headers_sent_throws: bool = True):
        self.sink = sink
        self.headers_sent_throws = headers_sent_throws
        self._headers: List[HeaderEntry] = []
        self._raw_headers: List[str] = []
        self._status = int(HTTPStatus.OK)
        self._is_redirect = False

    # =========================================================================
    # COMMIT CHECK
    # =========================================================================

    def can_send_headers(self, throw: bool = False) -> bool:
        """
        Check whether headers can still be sent.

        Args:
            throw: Raise instead of returning False (subject to
                   headers_sent_throws)

        Raises:
            HeadersSentError: If committed, throw is set and
                              headers_sent_throws is enabled
        """
        committed, location = self.sink.committed()
        if committed and throw:
            if self.headers_sent_throws:
                raise HeadersSentError(location)
            logger.warning("Headers already sent in %s", location or "unknown location")
        return not committed

    # =========================================================================
    # STRUCTURED HEADERS
    # =========================================================================

    def set_header(self, name: str, value: Any, replace: bool = False) -> "HeaderCollection":
        """
        Add a header.

        Args:
            name: Header name in any spelling ("x_foo", "X-FOO")
            value: Header value (converted to str)
            replace: Remove every existing header of the same name first
        """
        self.can_send_headers(throw=True)
        name = normalize_header_name(name)

        if replace:
            self._headers = [h for h in self._headers if h.name != name]

        self._headers.append(HeaderEntry(name, str(value), replace))
        return self

    def set_redirect(self, url: str, code: int = 302) -> "HeaderCollection":
        """
        Redirect to `url`: replace the Location header and set the code.

        The code is validated first, so an invalid code leaves the
        headers untouched.
        """
        self.can_send_headers(throw=True)
        if not is_valid_status(code):
            raise InvalidStatusCodeError(code)
        self.set_header("Location", url, replace=True)
        self.set_http_response_code(code)
        return self

    @property
    def headers(self) -> List[HeaderEntry]:
        return list(self._headers)

    def clear_headers(self) -> "HeaderCollection":
        self._headers = []
        return self

    # =========================================================================
    # RAW HEADERS
    # =========================================================================

    def set_raw_header(self, value: str) -> "HeaderCollection":
        """
        Add an unparsed header line, emitted verbatim.

        A line starting with "Location" marks the response as a redirect
        regardless of the status code.
        """
        self.can_send_headers(throw=True)
        value = str(value)
        if value.startswith("Location"):
            self._is_redirect = True
        self._raw_headers.append(value)
        return self

    @property
    def raw_headers(self) -> List[str]:
        return list(self._raw_headers)

    def clear_raw_headers(self) -> "HeaderCollection":
        self._raw_headers = []
        return self

    def clear_all_headers(self) -> "HeaderCollection":
        return self.clear_headers().clear_raw_headers()

    # =========================================================================
    # STATUS
    # =========================================================================

    def set_http_response_code(self, code: int) -> "HeaderCollection":
        """
        Set the response status code.

        Codes 300-307 set the redirect flag; any other valid code clears it.

        Raises:
            InvalidStatusCodeError: If code is not an int in [100, 599].
                                    The previous code is kept.
        """
        if not is_valid_status(code):
            raise InvalidStatusCodeError(code)
        self.can_send_headers(throw=True)
        self._is_redirect = is_redirect_status(code)
        self._status = int(code)
        return self

    @property
    def http_response_code(self) -> int:
        return self._status

    @property
    def is_redirect(self) -> bool:
        return self._is_redirect

    # =========================================================================
    # SEND
    # =========================================================================

    def send(self) -> "HeaderCollection":
        """
        Emit all headers and the status code to the sink.

        Raises:
            HeadersSentError: If there is something to send but the sink
                              already committed its headers
        """
        if not (self._raw_headers or self._headers or self._status != HTTPStatus.OK):
            return self

        self.can_send_headers(throw=True)

        code_sent = False

        for raw in self._raw_headers:
            if not code_sent:
                self.sink.emit(raw, True, self._status)
                code_sent = True
            else:
                self.sink.emit(raw)

        for header in self._headers:
            if not code_sent:
                self.sink.emit(header.line, header.replace, self._status)
                code_sent = True
            else:
                self.sink.emit(header.line, header.replace)

        if not code_sent:
            self.sink.emit(status_line(self._status), True, self._status)

        logger.debug(
            "Sent %d raw and %d structured headers with status %d",
            len(self._raw_headers), len(self._headers), self._status,
        )
        return self
