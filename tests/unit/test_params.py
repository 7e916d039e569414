"""
Unit tests for layered parameter resolution.
"""

import pytest

from httpfacade.http.errors import UsageError
from httpfacade.http.params import ALL_SOURCES, ParameterResolver


def make_resolver(**sources) -> ParameterResolver:
    """Helper to build a resolver over keyword-named sources."""
    return ParameterResolver(sources)


class TestResolve:
    """Tests for resolve()."""

    def test_end_to_end(self):
        """Test override, source and default resolution together."""
        resolver = make_resolver(query={"id": "9", "name": "a"})
        resolver.set_override("id", "7")

        assert resolver.resolve("id") == "7"
        assert resolver.resolve("name") == "a"
        assert resolver.resolve("missing", "d") == "d"

    def test_override_wins_even_when_empty(self):
        """Test that empty override values still shadow sources."""
        resolver = make_resolver(query={"q": "from-query"})
        resolver.set_override("q", "")
        assert resolver.resolve("q") == ""

        resolver.set_override("q", 0)
        assert resolver.resolve("q") == 0

    def test_removing_override_falls_through(self):
        """Test that setting None removes the override."""
        resolver = make_resolver(query={"id": "9"})
        resolver.set_override("id", "7")
        resolver.set_override("id", None)

        assert resolver.resolve("id") == "9"
        assert "id" not in resolver.overrides

    def test_source_order_decides_priority(self):
        """Test that the first listed source wins."""
        resolver = make_resolver(query={"k": "q"}, posted={"k": "p"})
        assert resolver.resolve("k") == "q"

        resolver.set_param_sources(["posted", "query"])
        assert resolver.resolve("k") == "p"

    def test_disabled_source_ignored(self):
        """Test that keys only in disabled sources resolve to default."""
        resolver = make_resolver(query={}, cookie={"session": "abc"})
        assert resolver.resolve("session", "none") == "none"

        resolver.set_param_sources(["query", "cookie"])
        assert resolver.resolve("session") == "abc"

    def test_no_sources_only_overrides(self):
        """Test an empty source list."""
        resolver = make_resolver(query={"a": "1"})
        resolver.set_param_sources([])
        resolver.set_override("b", "2")

        assert resolver.resolve("a") is None
        assert resolver.resolve("b") == "2"

    def test_none_source_value_counts_as_absent(self):
        """Test that None values in a source fall through."""
        resolver = make_resolver(query={"k": None}, posted={"k": "p"})
        assert resolver.resolve("k") == "p"

    def test_keys_are_strings(self):
        """Test that non-string keys are coerced."""
        resolver = make_resolver(query={"1": "one"})
        resolver.set_override(2, "two")

        assert resolver.resolve(1) == "one"
        assert resolver.resolve("2") == "two"

    def test_missing_source_is_empty(self):
        """Test enabling a source that was never supplied."""
        resolver = ParameterResolver({}, param_sources=["server"])
        assert resolver.resolve("anything", "d") == "d"


class TestGetAll:
    """Tests for get_all() merge direction."""

    def test_earlier_layers_win(self):
        """Test additive merge: overrides, then first source, then later ones."""
        resolver = make_resolver(
            query={"id": "9", "page": "2"},
            posted={"page": "5", "name": "a"},
        )
        resolver.set_override("id", "7")

        assert resolver.get_all() == {"id": "7", "page": "2", "name": "a"}

    def test_disabled_sources_excluded(self):
        """Test that only enabled sources are merged."""
        resolver = make_resolver(query={"a": "1"}, cookie={"c": "3"})
        assert resolver.get_all() == {"a": "1"}


class TestLookup:
    """Tests for lookup() and has() over all sources."""

    def test_fixed_chain_order(self):
        """Test override → query → posted → cookie → server → env."""
        resolver = make_resolver(
            query={"a": "query"},
            posted={"a": "posted", "b": "posted"},
            cookie={"b": "cookie", "c": "cookie"},
            server={"c": "server", "d": "server"},
            env={"d": "env", "e": "env"},
        )

        assert resolver.lookup("a") == "query"
        assert resolver.lookup("b") == "posted"
        assert resolver.lookup("c") == "cookie"
        assert resolver.lookup("d") == "server"
        assert resolver.lookup("e") == "env"
        assert resolver.lookup("f", "default") == "default"

    def test_lookup_ignores_enabled_list(self):
        """Test that lookup() reaches sources resolve() does not."""
        resolver = make_resolver(env={"HOME": "/root"})
        assert resolver.resolve("HOME") is None
        assert resolver.lookup("HOME") == "/root"

    def test_has(self):
        """Test has() across overrides and sources."""
        resolver = make_resolver(server={"REQUEST_METHOD": "GET"})
        resolver.set_override("id", "")

        assert resolver.has("REQUEST_METHOD")
        assert resolver.has("id")
        assert not resolver.has("missing")


class TestConfiguration:
    """Tests for overrides and source configuration."""

    def test_default_sources(self):
        """Test the default source list."""
        assert ParameterResolver().param_sources == ["query", "posted"]

    def test_unknown_source_rejected(self):
        """Test that unknown source names are usage errors."""
        with pytest.raises(UsageError):
            ParameterResolver(param_sources=["query", "body"])

        with pytest.raises(UsageError):
            ParameterResolver().set_param_sources("query")

    def test_all_sources_accepted(self):
        """Test that every known source can be enabled."""
        resolver = ParameterResolver().set_param_sources(ALL_SOURCES)
        assert resolver.param_sources == list(ALL_SOURCES)

    def test_set_overrides(self):
        """Test bulk overrides, including removal via None."""
        resolver = ParameterResolver()
        resolver.set_overrides({"a": "1", "b": "2"})
        resolver.set_overrides({"a": None})

        assert resolver.overrides == {"b": "2"}

    def test_set_overrides_requires_mapping(self):
        """Test that bulk overrides need a mapping."""
        with pytest.raises(UsageError):
            ParameterResolver().set_overrides(["a", "b"])

    def test_clear_overrides(self):
        """Test clearing all overrides."""
        resolver = make_resolver(query={"a": "q"})
        resolver.set_override("a", "o")
        resolver.clear_overrides()

        assert resolver.resolve("a") == "q"
