"""
=============================================================================
FACADE CONFIGURATION
=============================================================================

Centralized settings for the request and response facades.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Code        FacadeConfig(render_exceptions=True)               │
    │   2. Environment HTTPFACADE_RENDER_EXCEPTIONS=1                     │
    │   3. Defaults    (the dataclass fields below)                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validate once, when the config is built, not on first use.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple


_TRUE_VALUES = {"1", "true", "yes", "on"}

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class FacadeConfig:
    """
    Configuration shared by HTTPRequest and HTTPResponse.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    REQUEST
    - param_sources, header_prefix, request_id_header, promoted_headers

    RESPONSE
    - render_exceptions, headers_sent_throws

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST
    # ─────────────────────────────────────────────────────────────────────

    param_sources: Tuple[str, ...] = ("query", "posted")
    """
    Sources consulted by get_param(), highest priority first.
    Any of: query, posted, cookie, server, env.
    """

    header_prefix: str = "HTTP_"
    """Prefix of request header keys in server metadata (CGI/WSGI use HTTP_)."""

    request_id_header: str = "X-ND-UUID"
    """
    Header carrying the caller's request id.
    When the client sends none, one is generated.
    """

    promoted_headers: Tuple[str, ...] = (
        "X-ND-Authentication",
        "X-ND-AppKey",
        "X-ND-AppToken",
        "X-ND-UUID",
    )
    """Headers copied into the request parameters on construction."""

    # ─────────────────────────────────────────────────────────────────────
    # RESPONSE
    # ─────────────────────────────────────────────────────────────────────

    render_exceptions: bool = False
    """
    Send captured exceptions (with tracebacks) instead of the body.
    Development only: tracebacks leak internals.
    """

    headers_sent_throws: bool = True
    """Raise HeadersSentError when headers change after commit."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "WARNING"
    """Level for the httpfacade logger (DEBUG, INFO, WARNING, ...)."""

    @classmethod
    def from_env(cls) -> "FacadeConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPFACADE_PARAM_SOURCES        Comma list (default: query,posted)
        HTTPFACADE_REQUEST_ID_HEADER    Request id header (default: X-ND-UUID)
        HTTPFACADE_RENDER_EXCEPTIONS    1/true/yes/on (default: off)
        HTTPFACADE_HEADERS_SENT_THROWS  1/true/yes/on (default: on)
        HTTPFACADE_LOG_LEVEL            Logging level (default: WARNING)

        =====================================================================
        """
        sources = os.getenv("HTTPFACADE_PARAM_SOURCES")
        if sources is None:
            param_sources = ("query", "posted")
        else:
            param_sources = tuple(s.strip() for s in sources.split(",") if s.strip())

        config = cls(
            param_sources=param_sources,
            request_id_header=os.getenv("HTTPFACADE_REQUEST_ID_HEADER", "X-ND-UUID"),
            render_exceptions=_env_flag("HTTPFACADE_RENDER_EXCEPTIONS", False),
            headers_sent_throws=_env_flag("HTTPFACADE_HEADERS_SENT_THROWS", True),
            log_level=os.getenv("HTTPFACADE_LOG_LEVEL", "WARNING"),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid setting (UsageError for an
                        unknown param source)
        """
        # Imported here: the http package imports this module
        from .http.params import check_source_names

        check_source_names(self.param_sources)

        if not self.header_prefix:
            raise ValueError("header_prefix must not be empty")

        if not self.request_id_header:
            raise ValueError("request_id_header must not be empty")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")


def configure_logging(config: Optional[FacadeConfig] = None) -> None:
    """
    Configure logging for applications embedding httpfacade.

    The library never calls this itself; hosts opt in.
    """
    config = config or FacadeConfig()
    level = getattr(logging, config.log_level.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpfacade").setLevel(level)
