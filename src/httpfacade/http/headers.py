"""
=============================================================================
HEADER NAMES AND REQUEST HEADER LOOKUP
=============================================================================

A header name shows up in two spellings:

    Canonical form      X-Requested-With     (what a response emits)
    Transport key       HTTP_X_REQUESTED_WITH (how CGI/WSGI servers store
                                               request headers in their
                                               metadata map)

    "x_requested-with" ──normalize_header_name──► "X-Requested-With"
    "X-Requested-With" ──to_transport_key───────► "HTTP_X_REQUESTED_WITH"

HeaderLookup answers "what did the client send for header X?" by checking
server metadata under the transport key first, then an optional fallback
provider holding headers under their raw names (some servers keep
Authorization out of the metadata map).

=============================================================================
"""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from .errors import UsageError


logger = logging.getLogger(__name__)

DEFAULT_TRANSPORT_PREFIX = "HTTP_"

HeaderProvider = Union[Mapping[str, Any], Callable[[], Mapping[str, Any]]]


def normalize_header_name(name: str) -> str:
    """
    Convert a header name to its canonical form.

    Hyphens and underscores are interchangeable; every word is
    capitalised and the words are joined with hyphens.

    Example:
        normalize_header_name("content_type")  # "Content-Type"
        normalize_header_name("X-ND-UUID")     # "X-Nd-Uuid"
    """
    words = str(name).replace("-", " ").replace("_", " ").lower().split(" ")
    return "-".join(word[:1].upper() + word[1:] for word in words)


def to_transport_key(name: str, prefix: str = DEFAULT_TRANSPORT_PREFIX) -> str:
    """
    Convert a header name to its server metadata key.

    Example:
        to_transport_key("X-ND-UUID")  # "HTTP_X_ND_UUID"
    """
    return prefix + str(name).upper().replace("-", "_")


class HeaderLookup:
    """
    Request header lookup over server metadata with a fallback provider.

    Args:
        server: Server metadata map (CGI/WSGI environ style keys)
        fallback: Raw-name header map, or a zero-argument callable
                  returning one. Consulted only when server metadata
                  has no non-empty value.
        prefix: Transport key prefix, "HTTP_" for CGI/WSGI

    Example:
        lookup = HeaderLookup({"HTTP_X_REQUESTED_WITH": "XMLHttpRequest"})
        lookup.get("X-Requested-With")  # "XMLHttpRequest"
        lookup.get("X-Missing")         # None
    """

    def __init__(
        self,
        server: Mapping[str, Any],
        fallback: Optional[HeaderProvider] = None,
        prefix: str = DEFAULT_TRANSPORT_PREFIX,
    ):
        self._server = server
        self._fallback = fallback
        self.prefix = prefix

    def _fallback_headers(self) -> Mapping[str, Any]:
        if self._fallback is None:
            return {}
        if callable(self._fallback):
            return self._fallback() or {}
        return self._fallback

    def get(self, name: str, default: Any = None) -> Any:
        """
        Get a request header value.

        Args:
            name: Header name in any spelling accepted by to_transport_key
            default: Returned when neither source has a non-empty value

        Raises:
            UsageError: If name is empty
        """
        if not name:
            raise UsageError("An HTTP header name is required")

        value = self._server.get(to_transport_key(name, self.prefix))
        if value:
            return value

        # The fallback is keyed by the name exactly as given
        value = self._fallback_headers().get(name)
        if value:
            logger.debug("Header %s resolved from fallback provider", name)
            return value

        return default

    def has(self, name: str) -> bool:
        return self.get(name) is not None
