"""
Unit tests for the request facade.
"""

from typing import Any, Dict

import pytest

from httpfacade import FacadeConfig
from httpfacade.http.errors import UsageError
from httpfacade.http.request import HTTPRequest, parse_cookies, parse_form
from httpfacade.http.transport import BytesBodyReader


class TestParams:
    """Tests for parameter resolution through the request."""

    def test_end_to_end(self, id_generator):
        """Test params over query with a default."""
        request = HTTPRequest(query={"id": "9", "name": "a"}, id_generator=id_generator)
        request.set_param("id", "7")

        assert request.get_param("id") == "7"
        assert request.get_param("name") == "a"
        assert request.get_param("missing", "d") == "d"

    def test_query_before_posted(self, id_generator):
        """Test default source priority."""
        request = HTTPRequest(
            query={"k": "q"}, posted={"k": "p", "only_posted": "x"}, id_generator=id_generator
        )

        assert request.get_param("k") == "q"
        assert request.get_param("only_posted") == "x"

    def test_param_sources_from_config(self, id_generator):
        """Test that the config picks the enabled sources."""
        request = HTTPRequest(
            query={"k": "q"},
            cookies={"k": "c"},
            config=FacadeConfig(param_sources=("cookie",)),
            id_generator=id_generator,
        )
        assert request.param_sources == ["cookie"]
        assert request.get_param("k") == "c"

    def test_get_params_merge(self, id_generator):
        """Test merged params with earlier layers winning."""
        request = HTTPRequest(
            query={"a": "q", "b": "q"}, posted={"b": "p", "c": "p"}, id_generator=id_generator
        )
        request.set_param("a", "o")

        params = request.get_params()
        assert params["a"] == "o"
        assert params["b"] == "q"
        assert params["c"] == "p"

    def test_clear_params(self, id_generator):
        """Test that clearing params drops promoted headers too."""
        request = HTTPRequest(id_generator=id_generator)
        assert request.get_param("X-ND-UUID") == "req-0001"

        request.clear_params()
        assert request.get_param("X-ND-UUID") is None


class TestUnifiedLookup:
    """Tests for get() and has() across all sources."""

    def test_fixed_chain(self, id_generator):
        """Test lookup over every source."""
        request = HTTPRequest(
            query={"a": "query"},
            cookies={"session": "abc"},
            server={"REQUEST_METHOD": "GET"},
            env={"HOME": "/home/app"},
            id_generator=id_generator,
        )

        assert request.get("a") == "query"
        assert request.get("session") == "abc"
        assert request.get("REQUEST_METHOD") == "GET"
        assert request.get("HOME") == "/home/app"
        assert request.get("missing", "d") == "d"
        assert request.has("session")
        assert not request.has("missing")

    def test_callers_mappings_untouched(self, id_generator):
        """Test that the injected mappings are never mutated."""
        query: Dict[str, Any] = {"a": "1"}
        server: Dict[str, Any] = {}
        request = HTTPRequest(query=query, server=server, id_generator=id_generator)

        request.set_query("b", "2")

        assert query == {"a": "1"}
        assert server == {}
        assert request.get_query() == {"a": "1", "b": "2"}


class TestSourceAccessors:
    """Tests for get_/set_ source accessors."""

    def test_set_query_pair_and_mapping(self, id_generator):
        """Test both accepted argument shapes."""
        request = HTTPRequest(id_generator=id_generator)
        request.set_query("a", "1").set_query({"b": "2", "c": "3"})

        assert request.get_query("a") == "1"
        assert request.get_query("c") == "3"
        assert request.get_param("b") == "2"

    def test_set_post(self, id_generator):
        """Test setting posted values."""
        request = HTTPRequest(id_generator=id_generator)
        request.set_post({"name": "x"})

        assert request.get_post("name") == "x"
        assert request.get_post() == {"name": "x"}

    @pytest.mark.parametrize("bad", ["key", 42, ["a", "b"]])
    def test_set_query_bad_shape(self, id_generator, bad):
        """Test that a non-mapping without a value is a usage error."""
        request = HTTPRequest(id_generator=id_generator)
        with pytest.raises(UsageError):
            request.set_query(bad)
        with pytest.raises(UsageError):
            request.set_post(bad)

    def test_getters_with_default(self, id_generator):
        """Test default values on the source getters."""
        request = HTTPRequest(
            cookies={"theme": "dark"}, env={"LANG": "C"}, id_generator=id_generator
        )

        assert request.get_cookie("theme") == "dark"
        assert request.get_cookie("missing", "light") == "light"
        assert request.get_env("LANG") == "C"
        assert request.get_server("NOPE", 1) == 1


class TestConstruction:
    """Tests for construction-time behavior."""

    def test_generates_request_id(self, id_generator):
        """Test that a missing request id is generated."""
        request = HTTPRequest(id_generator=id_generator)

        assert id_generator.calls == 1
        assert request.request_id == "req-0001"
        assert request.get_server("HTTP_X_ND_UUID") == "req-0001"
        assert request.get_param("X-ND-UUID") == "req-0001"

    def test_keeps_client_request_id(self, id_generator):
        """Test that a client-supplied id is kept."""
        request = HTTPRequest(server={"HTTP_X_ND_UUID": "client-id"}, id_generator=id_generator)

        assert id_generator.calls == 0
        assert request.request_id == "client-id"

    def test_default_generator_uses_uuid(self):
        """Test the uuid4 default."""
        request = HTTPRequest()
        assert len(request.request_id) == 36

    def test_promotes_headers(self, id_generator):
        """Test that configured headers become params."""
        request = HTTPRequest(
            server={"HTTP_X_ND_APPKEY": "key-1", "HTTP_X_ND_APPTOKEN": "tok"},
            id_generator=id_generator,
        )

        assert request.get_param("X-ND-AppKey") == "key-1"
        assert request.get_param("X-ND-AppToken") == "tok"
        assert request.get_param("X-ND-Authentication") is None

    @pytest.mark.parametrize("method", ["PUT", "DELETE"])
    def test_put_delete_body_becomes_params(self, id_generator, method):
        """Test form bodies of PUT and DELETE requests."""
        request = HTTPRequest(
            query={"name": "from-query"},
            server={"REQUEST_METHOD": method},
            body_reader=BytesBodyReader(b"name=from-body&tag=a&tag=b"),
            id_generator=id_generator,
        )

        assert request.get_param("name") == "from-body"
        assert request.get_param("tag") == ["a", "b"]

    def test_post_body_not_parsed_into_params(self, id_generator):
        """Test that POST bodies are left to the posted source."""
        request = HTTPRequest(
            server={"REQUEST_METHOD": "POST"},
            body_reader=BytesBodyReader(b"name=x"),
            id_generator=id_generator,
        )
        assert request.get_param("name") is None
        assert request.raw_body == "name=x"


class TestRequestInfo:
    """Tests for method, scheme, host and body helpers."""

    def make(self, id_generator, **server) -> HTTPRequest:
        return HTTPRequest(server=server, id_generator=id_generator)

    def test_method_checks(self, id_generator):
        """Test method predicates."""
        request = self.make(id_generator, REQUEST_METHOD="post")

        assert request.is_post()
        assert not request.is_get()
        assert request.is_method("POST")
        assert not request.is_method("PATCH")
        assert not request.is_method(None)

    def test_is_ajax(self, id_generator):
        """Test XMLHttpRequest detection."""
        assert self.make(id_generator, HTTP_X_REQUESTED_WITH="XMLHttpRequest").is_ajax()
        assert not self.make(id_generator).is_ajax()

    def test_scheme(self, id_generator):
        """Test scheme detection."""
        assert self.make(id_generator, HTTPS="on").scheme == "https"
        assert self.make(id_generator, HTTPS="on").is_secure()
        assert self.make(id_generator).scheme == "http"

    def test_http_host_from_header(self, id_generator):
        """Test that the Host header wins."""
        request = self.make(id_generator, HTTP_HOST="example.com", SERVER_NAME="internal")
        assert request.http_host == "example.com"

    @pytest.mark.parametrize("https, port, expected", [
        (None, "80", "example.com"),
        ("on", "443", "example.com"),
        (None, "8080", "example.com:8080"),
        ("on", "80", "example.com:80"),
    ])
    def test_http_host_from_server_name(self, id_generator, https, port, expected):
        """Test default ports are omitted."""
        server = {"SERVER_NAME": "example.com", "SERVER_PORT": port}
        if https:
            server["HTTPS"] = https
        assert self.make(id_generator, **server).http_host == expected

    def test_raw_body_empty_is_none(self, id_generator):
        """Test that a whitespace body counts as no body."""
        request = HTTPRequest(body_reader=BytesBodyReader(b"  \n"), id_generator=id_generator)
        assert request.raw_body is None

    def test_get_header_empty_name(self, id_generator):
        """Test that an empty header name is a usage error."""
        with pytest.raises(UsageError):
            self.make(id_generator).get_header("")

    def test_header_fallback(self, id_generator):
        """Test the raw-name fallback provider."""
        request = HTTPRequest(
            header_fallback={"Authorization": "Bearer t"}, id_generator=id_generator
        )
        assert request.get_header("Authorization") == "Bearer t"


class TestFromEnviron:
    """Tests for building a request from a WSGI environ."""

    def test_sources(self, sample_environ, id_generator):
        """Test that every source is filled from the environ."""
        request = HTTPRequest.from_environ(sample_environ, env={}, id_generator=id_generator)

        assert request.get_query("page") == "2"
        assert request.get_post("email") == "john@example.com"
        assert request.get_post("tag") == ["a", "b"]
        assert request.get_cookie("session") == "abc123"
        assert request.http_host == "localhost:8080"
        assert request.is_post()
        assert request.is_ajax()

    def test_query_wins_over_post(self, sample_environ, id_generator):
        """Test default priority with real sources."""
        request = HTTPRequest.from_environ(sample_environ, env={}, id_generator=id_generator)
        assert request.get_param("name") == "query-name"

    def test_raw_body_still_available(self, sample_environ, id_generator):
        """Test that reading the form does not lose the raw body."""
        request = HTTPRequest.from_environ(sample_environ, env={}, id_generator=id_generator)
        assert request.raw_body.startswith("name=John")

    def test_environ_not_mutated(self, sample_environ, id_generator):
        """Test that the generated id stays on the request."""
        HTTPRequest.from_environ(sample_environ, env={}, id_generator=id_generator)
        assert "HTTP_X_ND_UUID" not in sample_environ


class TestParsers:
    """Tests for the form and cookie helpers."""

    def test_parse_form(self):
        """Test scalar and repeated values."""
        assert parse_form("a=1&b=2&b=3&empty=") == {"a": "1", "b": ["2", "3"], "empty": ""}

    def test_parse_cookies(self):
        """Test cookie header parsing."""
        assert parse_cookies("a=1; b=two") == {"a": "1", "b": "two"}
        assert parse_cookies("") == {}
