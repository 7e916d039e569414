"""
=============================================================================
TRANSPORT INTERFACES
=============================================================================

httpfacade never touches a socket. Everything that crosses the wire goes
through the small interfaces defined here, which the host environment
implements (a WSGI adapter, a test double, a raw socket server...).

    ┌──────────────────────┐        ┌──────────────────────────────────┐
    │  HTTPRequest         │ ◄───── │ RawBodyReader   (request body)   │
    │                      │ ◄───── │ IdGenerator     (request id)     │
    └──────────────────────┘        └──────────────────────────────────┘

    ┌──────────────────────┐        ┌──────────────────────────────────┐
    │  HTTPResponse        │ ─────► │ HeaderSink      (status/headers) │
    │                      │ ─────► │ BodyWriter      (body text)      │
    └──────────────────────┘        └──────────────────────────────────┘

=============================================================================
HEADER COMMIT
=============================================================================

Headers must go out before the body. Once the transport has written any
body output, the headers are "committed" and can no longer change.
HeaderSink.committed() reports that latch, and where it was tripped, so
the response can fail with a useful message instead of silently dropping
headers.

BufferedTransport implements both response-side interfaces in memory. It
trips the latch on the first body write, exactly like a real server would.

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Tuple
import traceback
import uuid


# =============================================================================
# RESPONSE SIDE
# =============================================================================

class HeaderSink(ABC):
    """Writes status lines and header lines to the transport."""

    @abstractmethod
    def emit(self, line: str, replace: bool = True, status_code: Optional[int] = None) -> None:
        """
        Write one header line (or a bare status line).

        Args:
            line: "Name: value", a raw header, or "HTTP/1.1 302 Found"
            replace: Whether this line replaces earlier same-named lines
            status_code: Response code to send along with this line, if any
        """

    @abstractmethod
    def committed(self) -> Tuple[bool, Optional[str]]:
        """
        Report whether headers were already sent.

        Returns:
            (committed, location) where location names the commit site
            ("file.py, line 12") when it is known.
        """


class BodyWriter(ABC):
    """Writes response body text to the transport."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Write a chunk of body text."""


@dataclass(frozen=True)
class HeaderLine:
    """One recorded HeaderSink.emit() call."""

    line: str
    replace: bool = True
    status_code: Optional[int] = None


class BufferedTransport(HeaderSink, BodyWriter):
    """
    In-memory transport that records everything it is given.

    Useful for tests and for rendering a response to a string:

        transport = BufferedTransport()
        response = HTTPResponse(transport)
        response.append_body("hello").send_response()

        transport.header_lines  # [HeaderLine(...), ...]
        transport.body          # "hello"
    """

    def __init__(self):
        self.header_lines: List[HeaderLine] = []
        self._chunks: List[str] = []
        self._committed_at: Optional[str] = None
        self._committed = False

    def emit(self, line: str, replace: bool = True, status_code: Optional[int] = None) -> None:
        self.header_lines.append(HeaderLine(line, replace, status_code))

    def write(self, text: str) -> None:
        if not self._committed:
            # The frame two levels up is whoever asked for body output
            caller = traceback.extract_stack(limit=3)[0]
            self._committed_at = f"{caller.filename}, line {caller.lineno}"
            self._committed = True
        self._chunks.append(text)

    def committed(self) -> Tuple[bool, Optional[str]]:
        return self._committed, self._committed_at

    def commit(self, location: Optional[str] = None) -> None:
        """Trip the header latch without writing a body."""
        self._committed = True
        self._committed_at = location

    @property
    def status_code(self) -> Optional[int]:
        """The status code carried by the emitted lines, if any."""
        for header in self.header_lines:
            if header.status_code is not None:
                return header.status_code
        return None

    @property
    def body(self) -> str:
        """All body text written so far."""
        return "".join(self._chunks)


# =============================================================================
# REQUEST SIDE
# =============================================================================

class RawBodyReader(ABC):
    """Reads the raw, unparsed request body."""

    @abstractmethod
    def read(self) -> bytes:
        """Return the request body, or b"" when there is none."""


class BytesBodyReader(RawBodyReader):
    """Serves a body that is already in memory."""

    def __init__(self, data: bytes = b""):
        self._data = data

    def read(self) -> bytes:
        return self._data


class StreamBodyReader(RawBodyReader):
    """
    Reads the body from a file-like object (e.g. WSGI's wsgi.input).

    The stream is consumed once; later reads return the cached bytes.
    When `length` is given, at most that many bytes are read, which is
    what CONTENT_LENGTH is for: wsgi.input may block past the body.
    """

    def __init__(self, stream: BinaryIO, length: Optional[int] = None):
        self._stream = stream
        self._length = length
        self._data: Optional[bytes] = None

    def read(self) -> bytes:
        if self._data is None:
            if self._length is None:
                self._data = self._stream.read()
            elif self._length > 0:
                self._data = self._stream.read(self._length)
            else:
                self._data = b""
        return self._data


class IdGenerator(ABC):
    """Produces unique request identifiers."""

    @abstractmethod
    def generate(self) -> str:
        """Return a new unique identifier."""


class UUIDGenerator(IdGenerator):
    """Random (version 4) UUIDs in canonical 8-4-4-4-12 form."""

    def generate(self) -> str:
        return str(uuid.uuid4())
