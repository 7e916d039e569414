"""
=============================================================================
HTTP RESPONSE ASSEMBLER
=============================================================================

HTTPResponse collects everything a handler wants to send and writes it to
the transport in one step, at the end of the request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         HTTPResponse                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HeaderCollection         status code, redirect flag,              │
    │                            structured + raw headers                 │
    │                                                                      │
    │   OrderedSegmentDocument   named body segments                      │
    │                                                                      │
    │   ExceptionLedger          errors captured along the way            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘
                │ send_response()
                ▼
        HeaderSink.emit(...)     headers first
        BodyWriter.write(...)    then the body

=============================================================================
SEND RESPONSE
=============================================================================

    send_response()
        │
        ├── send_headers()
        │
        ├── exceptions captured AND render_exceptions on?
        │       yes → write every exception's text + "\n", stop
        │
        └── write the body segments, concatenated in order

=============================================================================
USAGE
=============================================================================

    transport = BufferedTransport()
    response = HTTPResponse(transport)

    (response
        .set_header("Content-Type", "text/html; charset=utf-8")
        .append("layout", "<body></body>")
        .insert("nav", "<nav/>", parent="layout", before=True))

    response.send_response()
    transport.body   # "<nav/><body></body>"

=============================================================================
"""

import logging
from typing import Any, Dict, List, Optional, Union

from ..config import FacadeConfig
from .exception_ledger import ExceptionLedger, ExceptionRecord
from .header_collection import HeaderCollection, HeaderEntry
from .segments import OrderedSegmentDocument
from .transport import BodyWriter, BufferedTransport, HeaderSink


logger = logging.getLogger(__name__)


class HTTPResponse:
    """
    Response facade composing headers, body segments and captured errors.

    Args:
        sink: Where headers go. Defaults to a new BufferedTransport.
        writer: Where the body goes. Defaults to the sink when it is
                also a BodyWriter.
        config: Facade configuration (render_exceptions,
                headers_sent_throws)
    """

    def __init__(
        self,
        sink: Optional[HeaderSink] = None,
        writer: Optional[BodyWriter] = None,
        config: Optional[FacadeConfig] = None,
    ):
        self.config = config or FacadeConfig()

        if sink is None:
            sink = BufferedTransport()
        if writer is None:
            if not isinstance(sink, BodyWriter):
                raise TypeError("A BodyWriter is required when the sink cannot write a body")
            writer = sink

        self.sink = sink
        self.writer = writer
        self.header_collection = HeaderCollection(sink, self.config.headers_sent_throws)
        self.document = OrderedSegmentDocument()
        self.ledger = ExceptionLedger()
        self._render_exceptions = self.config.render_exceptions

    # =========================================================================
    # HEADERS AND STATUS
    # =========================================================================

    def can_send_headers(self, throw: bool = False) -> bool:
        return self.header_collection.can_send_headers(throw)

    def set_header(self, name: str, value: Any, replace: bool = False) -> "HTTPResponse":
        self.header_collection.set_header(name, value, replace)
        return self

    def set_redirect(self, url: str, code: int = 302) -> "HTTPResponse":
        self.header_collection.set_redirect(url, code)
        return self

    def is_redirect(self) -> bool:
        return self.header_collection.is_redirect

    @property
    def headers(self) -> List[HeaderEntry]:
        return self.header_collection.headers

    def clear_headers(self) -> "HTTPResponse":
        self.header_collection.clear_headers()
        return self

    def set_raw_header(self, value: str) -> "HTTPResponse":
        self.header_collection.set_raw_header(value)
        return self

    @property
    def raw_headers(self) -> List[str]:
        return self.header_collection.raw_headers

    def clear_raw_headers(self) -> "HTTPResponse":
        self.header_collection.clear_raw_headers()
        return self

    def clear_all_headers(self) -> "HTTPResponse":
        self.header_collection.clear_all_headers()
        return self

    def set_http_response_code(self, code: int) -> "HTTPResponse":
        self.header_collection.set_http_response_code(code)
        return self

    @property
    def http_response_code(self) -> int:
        return self.header_collection.http_response_code

    def send_headers(self) -> "HTTPResponse":
        self.header_collection.send()
        return self

    # =========================================================================
    # BODY
    # =========================================================================

    def set_body(self, content: str, name: Optional[str] = None) -> "HTTPResponse":
        """
        Set body content.

        Without a name, the body becomes a single "default" segment and
        every other segment is dropped. With a name, only that segment is
        set (in place if it exists, at the end if not).
        """
        self.document.set(content, name)
        return self

    def append_body(self, content: str, name: Optional[str] = None) -> "HTTPResponse":
        """Concatenate onto a segment ("default" if no name), creating it if needed."""
        self.document.extend(content, name)
        return self

    def clear_body(self, name: Optional[str] = None) -> bool:
        """
        Clear one segment, or the whole body.

        Returns:
            False only when a named segment did not exist
        """
        if name is not None:
            return self.document.remove(name)
        self.document.clear()
        return True

    def get_body(self, which: Union[bool, str] = False) -> Any:
        """
        Get the body.

        Args:
            which: False → concatenated body text
                   True  → ordered {name: content} dict
                   name  → that segment's content (None if absent)
        """
        if which is False:
            return self.document.serialize()
        if which is True:
            return self.document.get()
        if isinstance(which, str):
            return self.document.get(which)
        return None

    def append(self, name: str, content: str) -> "HTTPResponse":
        self.document.append(name, content)
        return self

    def prepend(self, name: str, content: str) -> "HTTPResponse":
        self.document.prepend(name, content)
        return self

    def insert(
        self,
        name: str,
        content: str,
        parent: Optional[str] = None,
        before: bool = False,
    ) -> "HTTPResponse":
        self.document.insert(name, content, parent, before)
        return self

    def output_body(self) -> None:
        """Write the concatenated body segments to the writer."""
        self.writer.write(self.document.serialize())

    # =========================================================================
    # EXCEPTIONS
    # =========================================================================

    def set_exception(self, error: BaseException, code: Optional[int] = None) -> "HTTPResponse":
        self.ledger.append(error, code)
        return self

    @property
    def exceptions(self) -> List[ExceptionRecord]:
        return self.ledger.records

    def is_exception(self) -> bool:
        return len(self.ledger) > 0

    def has_exception_of_type(self, kind: Union[type, str]) -> bool:
        return self.ledger.has_type(kind)

    def has_exception_of_message(self, message: str) -> bool:
        return self.ledger.has_message(message)

    def has_exception_of_code(self, code: int) -> bool:
        return self.ledger.has_code(code)

    def get_exception_by_type(self, kind: Union[type, str]) -> Optional[List[ExceptionRecord]]:
        return self.ledger.by_type(kind)

    def get_exception_by_message(self, message: str) -> Optional[List[ExceptionRecord]]:
        return self.ledger.by_message(message)

    def get_exception_by_code(self, code: int) -> Optional[List[ExceptionRecord]]:
        return self.ledger.by_code(code)

    def render_exceptions(self, flag: Optional[bool] = None) -> bool:
        """Get, and optionally set, whether exceptions replace the body on send."""
        if flag is not None:
            self._render_exceptions = bool(flag)
        return self._render_exceptions

    # =========================================================================
    # SEND
    # =========================================================================

    def render_body(self) -> str:
        """The body text send_response() would write."""
        if self.is_exception() and self.render_exceptions():
            return self.ledger.render()
        return self.document.serialize()

    def send_response(self) -> None:
        """
        Send headers, then the body (or the rendered exceptions).

        Raises:
            HeadersSentError: If headers are pending but already committed
        """
        self.send_headers()

        if self.is_exception() and self.render_exceptions():
            logger.debug("Rendering %d captured exception(s) instead of body", len(self.ledger))
            self.writer.write(self.ledger.render())
            return

        self.output_body()

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the response state, for logging and debugging."""
        return {
            "status": self.http_response_code,
            "redirect": self.is_redirect(),
            "headers": [(h.name, h.value) for h in self.headers],
            "raw_headers": self.raw_headers,
            "segments": self.document.names(),
            "exceptions": len(self.ledger),
        }

    def __str__(self) -> str:
        return self.render_body()
