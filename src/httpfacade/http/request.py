"""
=============================================================================
HTTP REQUEST FACADE
=============================================================================

HTTPRequest gives application code one place to read request data from,
whatever the data came in through.

=============================================================================
DATA SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     WHERE REQUEST DATA LIVES                        │
    ├──────────┬──────────────────────────────────────────────────────────┤
    │ query    │ ?page=2&sort=name              parsed query string       │
    │ posted   │ name=a&email=b                 parsed form body          │
    │ cookie   │ Cookie: session=abc            parsed cookies            │
    │ server   │ REQUEST_METHOD, HTTP_HOST...   server/header metadata    │
    │ env      │ PATH, HOME...                  process environment       │
    │ params   │ set_param("id", 7)             explicit overrides        │
    └──────────┴──────────────────────────────────────────────────────────┘

The mappings are COPIED at construction: set_query()/set_post() and the
generated request id change this request's view only, never the caller's
dicts.

=============================================================================
CONSTRUCTION
=============================================================================

    HTTPRequest(query=..., posted=..., server=..., ...)
        │
        ├── 1. PUT/DELETE: parse the raw body as a form, set as params
        │
        ├── 2. No request-id header? Generate one into server metadata
        │
        └── 3. Copy promoted headers (X-ND-AppKey, ...) into params

=============================================================================
TWO KINDS OF LOOKUP
=============================================================================

    request.get_param("id")   overrides → ENABLED sources (query, posted)
    request.get("id")         overrides → query → posted → cookie
                                        → server → env

=============================================================================
"""

import logging
import os
from http.cookies import CookieError, SimpleCookie
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import parse_qs

from ..config import FacadeConfig
from .errors import UsageError
from .headers import HeaderLookup, HeaderProvider, to_transport_key
from .params import COOKIE, ENV, POSTED, QUERY, SERVER, ParameterResolver
from .transport import (
    BytesBodyReader,
    IdGenerator,
    RawBodyReader,
    StreamBodyReader,
    UUIDGenerator,
)


logger = logging.getLogger(__name__)

SCHEME_HTTP = "http"
SCHEME_HTTPS = "https"

ALLOWED_METHODS = {"POST", "GET", "PUT", "DELETE", "HEAD", "OPTIONS"}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_form(data: str) -> Dict[str, Any]:
    """
    Parse an urlencoded form.

    Single values become plain strings; repeated keys keep every value:

        parse_form("a=1&b=2&b=3")  # {"a": "1", "b": ["2", "3"]}
    """
    parsed = parse_qs(data, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def parse_cookies(header: str) -> Dict[str, str]:
    """Parse a Cookie header into {name: value}; malformed headers give {}."""
    cookie = SimpleCookie()
    try:
        cookie.load(header)
    except CookieError:
        logger.debug("Ignoring malformed Cookie header: %r", header)
        return {}
    return {name: morsel.value for name, morsel in cookie.items()}


class HTTPRequest:
    """
    Request facade over injected, read-only data sources.

    Args:
        query: Parsed query string parameters
        posted: Parsed form body parameters
        cookies: Parsed cookies
        server: Server/header metadata (CGI/WSGI environ style)
        env: Process environment
        body_reader: Raw body source (empty body if omitted)
        id_generator: Request id generator (uuid4 if omitted)
        header_fallback: Raw-name header map (or callable returning one)
                         consulted when server metadata lacks a header
        config: Facade configuration

    Example:
        request = HTTPRequest(query={"id": "9", "name": "a"})
        request.set_param("id", "7")

        request.get_param("id")              # "7"
        request.get_param("name")            # "a"
        request.get_param("missing", "d")    # "d"
    """

    def __init__(
        self,
        query: Optional[Mapping[str, Any]] = None,
        posted: Optional[Mapping[str, Any]] = None,
        cookies: Optional[Mapping[str, Any]] = None,
        server: Optional[Mapping[str, Any]] = None,
        env: Optional[Mapping[str, Any]] = None,
        body_reader: Optional[RawBodyReader] = None,
        id_generator: Optional[IdGenerator] = None,
        header_fallback: Optional[HeaderProvider] = None,
        config: Optional[FacadeConfig] = None,
    ):
        self.config = config or FacadeConfig()

        self._query: Dict[str, Any] = dict(query or {})
        self._posted: Dict[str, Any] = dict(posted or {})
        self._cookies: Dict[str, Any] = dict(cookies or {})
        self._server: Dict[str, Any] = dict(server or {})
        self._env: Dict[str, Any] = dict(env or {})

        self._body_reader = body_reader or BytesBodyReader()
        self._id_generator = id_generator or UUIDGenerator()
        self._raw_body: Optional[str] = None
        self._raw_body_read = False

        self._resolver = ParameterResolver(
            {
                QUERY: self._query,
                POSTED: self._posted,
                COOKIE: self._cookies,
                SERVER: self._server,
                ENV: self._env,
            },
            self.config.param_sources,
        )
        self._headers = HeaderLookup(self._server, header_fallback, self.config.header_prefix)

        self._parse_raw_body()
        self._ensure_request_id()
        self._promote_headers()

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, Any],
        env: Optional[Mapping[str, Any]] = None,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[FacadeConfig] = None,
    ) -> "HTTPRequest":
        """
        Build a request from a WSGI environ dict.

        Query comes from QUERY_STRING, cookies from HTTP_COOKIE, and the
        posted map from wsgi.input when a POST carries an urlencoded form.
        The environ itself becomes the server metadata.
        """
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0

        stream = environ.get("wsgi.input")
        reader: RawBodyReader
        if stream is not None:
            reader = StreamBodyReader(stream, length)
        else:
            reader = BytesBodyReader()

        posted: Dict[str, Any] = {}
        content_type = str(environ.get("CONTENT_TYPE", "")).split(";")[0].strip().lower()
        if str(environ.get("REQUEST_METHOD", "")).upper() == "POST" and content_type == FORM_CONTENT_TYPE:
            posted = parse_form(reader.read().decode("utf-8", errors="replace"))

        return cls(
            query=parse_form(environ.get("QUERY_STRING", "")),
            posted=posted,
            cookies=parse_cookies(environ.get("HTTP_COOKIE", "")),
            server=environ,
            env=os.environ if env is None else env,
            body_reader=reader,
            id_generator=id_generator,
            config=config,
        )

    # =========================================================================
    # CONSTRUCTION STEPS
    # =========================================================================

    def _parse_raw_body(self) -> None:
        if self.is_put() or self.is_delete():
            self.set_params(parse_form(self.raw_body or ""))

    def _ensure_request_id(self) -> None:
        header = self.config.request_id_header
        if not self.get_header(header):
            request_id = self._id_generator.generate()
            self._server[to_transport_key(header, self.config.header_prefix)] = request_id
            logger.debug("Generated request id %s", request_id)

    def _promote_headers(self) -> None:
        for name in self.config.promoted_headers:
            value = self.get_header(name)
            if value is not None:
                self.set_param(name, value)
                logger.debug("Promoted header %s into params", name)

    # =========================================================================
    # UNIFIED LOOKUP
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Look a key up in params, then query, posted, cookie, server, env."""
        return self._resolver.lookup(key, default)

    def has(self, key: str) -> bool:
        return self._resolver.has(key)

    # =========================================================================
    # PARAMS
    # =========================================================================

    def get_param(self, key: str, default: Any = None) -> Any:
        """Look a key up in params, then in the enabled param sources."""
        return self._resolver.resolve(key, default)

    def set_param(self, key: Any, value: Any) -> "HTTPRequest":
        """Set a param; None removes it."""
        self._resolver.set_override(key, value)
        return self

    def set_params(self, params: Mapping[str, Any]) -> "HTTPRequest":
        self._resolver.set_overrides(params)
        return self

    def get_params(self) -> Dict[str, Any]:
        """Params merged with the enabled sources; params win, then source order."""
        return self._resolver.get_all()

    def clear_params(self) -> "HTTPRequest":
        self._resolver.clear_overrides()
        return self

    @property
    def param_sources(self) -> List[str]:
        return self._resolver.param_sources

    def set_param_sources(self, names: Iterable[str]) -> "HTTPRequest":
        self._resolver.set_param_sources(names)
        return self

    # =========================================================================
    # SOURCE ACCESSORS
    # =========================================================================

    @staticmethod
    def _read(source: Dict[str, Any], key: Optional[str], default: Any) -> Any:
        if key is None:
            return dict(source)
        value = source.get(key)
        return default if value is None else value

    @staticmethod
    def _write(source: Dict[str, Any], data: Any, value: Any, method: str) -> None:
        if value is None:
            if not isinstance(data, Mapping):
                raise UsageError(
                    f"Invalid value passed to {method}(); must be either "
                    f"a mapping of values or a key/value pair"
                )
            for key, item in data.items():
                HTTPRequest._write(source, key, item, method)
            return
        source[str(data)] = value

    def get_query(self, key: Optional[str] = None, default: Any = None) -> Any:
        return self._read(self._query, key, default)

    def set_query(self, data: Any, value: Any = None) -> "HTTPRequest":
        """
        Set query parameters on this request.

        Accepts a key and a value, or a mapping with no value.

        Raises:
            UsageError: If value is None and data is not a mapping
        """
        self._write(self._query, data, value, "set_query")
        return self

    def get_post(self, key: Optional[str] = None, default: Any = None) -> Any:
        return self._read(self._posted, key, default)

    def set_post(self, data: Any, value: Any = None) -> "HTTPRequest":
        """Set posted parameters on this request; see set_query()."""
        self._write(self._posted, data, value, "set_post")
        return self

    def get_cookie(self, key: Optional[str] = None, default: Any = None) -> Any:
        return self._read(self._cookies, key, default)

    def get_server(self, key: Optional[str] = None, default: Any = None) -> Any:
        return self._read(self._server, key, default)

    def get_env(self, key: Optional[str] = None, default: Any = None) -> Any:
        return self._read(self._env, key, default)

    # =========================================================================
    # HEADERS
    # =========================================================================

    def get_header(self, name: str, default: Any = None) -> Any:
        """
        Get a request header.

        Raises:
            UsageError: If name is empty
        """
        return self._headers.get(name, default)

    @property
    def request_id(self) -> Optional[str]:
        return self.get_header(self.config.request_id_header)

    # =========================================================================
    # METHOD
    # =========================================================================

    @property
    def method(self) -> str:
        return str(self.get_server("REQUEST_METHOD", ""))

    def is_method(self, method: Any) -> bool:
        if not isinstance(method, str):
            return False
        method = method.upper()
        return method in ALLOWED_METHODS and self.method.upper() == method

    def is_post(self) -> bool:
        return self.is_method("POST")

    def is_get(self) -> bool:
        return self.is_method("GET")

    def is_put(self) -> bool:
        return self.is_method("PUT")

    def is_delete(self) -> bool:
        return self.is_method("DELETE")

    def is_head(self) -> bool:
        return self.is_method("HEAD")

    def is_options(self) -> bool:
        return self.is_method("OPTIONS")

    def is_ajax(self) -> bool:
        return self.get_header("X_REQUESTED_WITH") == "XMLHttpRequest"

    # =========================================================================
    # URL PARTS
    # =========================================================================

    @property
    def scheme(self) -> str:
        return SCHEME_HTTPS if self.get_server("HTTPS") == "on" else SCHEME_HTTP

    def is_secure(self) -> bool:
        return self.scheme == SCHEME_HTTPS

    @property
    def http_host(self) -> str:
        """
        The host the client asked for.

        Uses the Host header when present, else SERVER_NAME plus
        SERVER_PORT unless the port is the scheme's default.
        """
        host = self.get_server("HTTP_HOST")
        if host:
            return host

        name = self.get_server("SERVER_NAME", "")
        port = str(self.get_server("SERVER_PORT", ""))
        scheme = self.scheme

        if (scheme == SCHEME_HTTP and port == "80") or (scheme == SCHEME_HTTPS and port == "443"):
            return name
        return f"{name}:{port}"

    # =========================================================================
    # BODY
    # =========================================================================

    @property
    def raw_body(self) -> Optional[str]:
        """
        The unparsed request body, or None if it is empty or whitespace.

        Read from the body reader once, on first access.
        """
        if not self._raw_body_read:
            data = self._body_reader.read() or b""
            text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else str(data)
            self._raw_body = text if text.strip() else None
            self._raw_body_read = True
        return self._raw_body
