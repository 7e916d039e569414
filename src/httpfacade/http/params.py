"""
=============================================================================
PARAMETER RESOLUTION
=============================================================================

Request data arrives from several places. ParameterResolver answers
"what is the value of key X?" by walking them in a fixed priority order.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     RESOLUTION CHAIN (resolve)                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Overrides         set_override("id", "7")   ◄── always wins     │
    │            │                                                         │
    │            ▼  not set                                                │
    │   2. Enabled sources, in configured order                            │
    │        "query"   ?id=9                                               │
    │        "posted"  id=3 (form body)                                    │
    │            │                                                         │
    │            ▼  not found                                              │
    │   3. default                                                         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only sources listed in param_sources take part in resolve() and get_all().
lookup()/has() walk a fixed chain over ALL sources instead:

    overrides → query → posted → cookie → server → env

=============================================================================
MERGE DIRECTION IN get_all()
=============================================================================

get_all() merges additively: a key already contributed by a higher
priority layer is never overwritten by a lower one.

    overrides   {"id": "7"}
    query       {"id": "9", "page": "2"}
    posted      {"page": "5", "name": "a"}

    get_all()   {"id": "7", "page": "2", "name": "a"}

This is NOT dict.update() order (where the last writer wins).

=============================================================================
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import UsageError


logger = logging.getLogger(__name__)

QUERY = "query"
POSTED = "posted"
COOKIE = "cookie"
SERVER = "server"
ENV = "env"

# Fixed order used by lookup() and has()
ALL_SOURCES = (QUERY, POSTED, COOKIE, SERVER, ENV)

DEFAULT_PARAM_SOURCES = (QUERY, POSTED)


def check_source_names(names: Iterable[str]) -> List[str]:
    """
    Validate a list of source names.

    Raises:
        UsageError: If any name is not one of ALL_SOURCES
    """
    if isinstance(names, str):
        raise UsageError("Parameter sources must be a list of names, not a string")
    names = list(names)
    unknown = [name for name in names if name not in ALL_SOURCES]
    if unknown:
        raise UsageError(
            f"Unknown parameter source(s): {', '.join(map(str, unknown))}. "
            f"Expected any of: {', '.join(ALL_SOURCES)}"
        )
    return names


class ParameterResolver:
    """
    Layered key/value lookup: explicit overrides over external sources.

    Args:
        sources: Source name → read-only mapping. Missing sources are
                 treated as empty.
        param_sources: Enabled sources for resolve()/get_all(), highest
                       priority first

    Example:
        resolver = ParameterResolver({"query": {"id": "9", "name": "a"}})
        resolver.set_override("id", "7")

        resolver.resolve("id")              # "7"
        resolver.resolve("name")            # "a"
        resolver.resolve("missing", "d")    # "d"
    """

    def __init__(
        self,
        sources: Optional[Mapping[str, Mapping[str, Any]]] = None,
        param_sources: Iterable[str] = DEFAULT_PARAM_SOURCES,
    ):
        self._sources: Mapping[str, Mapping[str, Any]] = sources or {}
        self._params: Dict[str, Any] = {}
        self._param_sources = check_source_names(param_sources)

    # =========================================================================
    # SOURCES
    # =========================================================================

    def source(self, name: str) -> Mapping[str, Any]:
        """Get one source mapping (empty if it was never supplied)."""
        return self._sources.get(name) or {}

    @property
    def param_sources(self) -> List[str]:
        return list(self._param_sources)

    def set_param_sources(self, names: Iterable[str]) -> "ParameterResolver":
        """
        Choose which sources take part in resolve() and their priority.

        An empty list disables all sources: only overrides resolve.
        """
        self._param_sources = check_source_names(names)
        logger.debug("Parameter sources: %s", self._param_sources)
        return self

    # =========================================================================
    # OVERRIDES
    # =========================================================================

    def set_override(self, key: Any, value: Any) -> "ParameterResolver":
        """
        Set an explicit parameter that shadows every source.

        Setting None removes the override, letting sources show through.
        """
        key = str(key)
        if value is None:
            self._params.pop(key, None)
        else:
            self._params[key] = value
        return self

    def set_overrides(self, params: Mapping[str, Any]) -> "ParameterResolver":
        if not isinstance(params, Mapping):
            raise UsageError(
                f"Overrides must be a mapping, got {type(params).__name__}"
            )
        for key, value in params.items():
            self.set_override(key, value)
        return self

    def clear_overrides(self) -> "ParameterResolver":
        self._params = {}
        return self

    @property
    def overrides(self) -> Dict[str, Any]:
        return dict(self._params)

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve(self, key: Any, default: Any = None) -> Any:
        """
        Resolve a key through overrides and the enabled sources.

        An override is returned even when it is empty ("" or 0). Source
        entries holding None count as absent.
        """
        key = str(key)
        if key in self._params:
            return self._params[key]

        for name in self._param_sources:
            value = self.source(name).get(key)
            if value is not None:
                return value

        return default

    def get_all(self) -> Dict[str, Any]:
        """Merge overrides and enabled sources; earlier layers win."""
        merged = dict(self._params)
        for name in self._param_sources:
            for key, value in self.source(name).items():
                if key not in merged:
                    merged[key] = value
        return merged

    def lookup(self, key: Any, default: Any = None) -> Any:
        """Resolve a key through overrides and ALL sources, in fixed order."""
        key = str(key)
        if key in self._params:
            return self._params[key]

        for name in ALL_SOURCES:
            value = self.source(name).get(key)
            if value is not None:
                return value

        return default

    def has(self, key: Any) -> bool:
        """Check if lookup() would find the key."""
        key = str(key)
        if key in self._params:
            return True
        return any(self.source(name).get(key) is not None for name in ALL_SOURCES)
