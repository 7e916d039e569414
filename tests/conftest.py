"""
pytest configuration and fixtures.
"""

import io
from typing import Any, Dict

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpfacade import FacadeConfig
from httpfacade.http import BufferedTransport, HTTPResponse, IdGenerator


class FixedIdGenerator(IdGenerator):
    """Id generator returning a known value, counting its calls."""

    def __init__(self, value: str = "req-0001"):
        self.value = value
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return self.value


@pytest.fixture
def id_generator() -> FixedIdGenerator:
    return FixedIdGenerator()


@pytest.fixture
def transport() -> BufferedTransport:
    """In-memory transport recording header lines and body."""
    return BufferedTransport()


@pytest.fixture
def response(transport: BufferedTransport) -> HTTPResponse:
    """Response wired to the in-memory transport."""
    return HTTPResponse(transport)


@pytest.fixture
def config() -> FacadeConfig:
    """Default facade configuration."""
    return FacadeConfig()


@pytest.fixture
def sample_environ() -> Dict[str, Any]:
    """WSGI environ for a form POST with query string and cookies."""
    body = b"name=John&email=john%40example.com&tag=a&tag=b"
    return {
        "REQUEST_METHOD": "POST",
        "QUERY_STRING": "page=2&name=query-name",
        "CONTENT_TYPE": "application/x-www-form-urlencoded; charset=utf-8",
        "CONTENT_LENGTH": str(len(body)),
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "HTTP_HOST": "localhost:8080",
        "HTTP_COOKIE": "session=abc123; theme=dark",
        "HTTP_X_REQUESTED_WITH": "XMLHttpRequest",
        "wsgi.input": io.BytesIO(body),
    }
