"""Tests for wren.http.response — Response chaining and body helpers."""

from wren.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == b""
        assert r.status == 200
        assert r.content_type == "application/json"
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response().with_status(201).status == 201

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_header("B", "2")
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/plain").content_type == "text/plain"

    def test_immutable_chain(self) -> None:
        original = Response(body=b"[]")
        changed = original.with_status(404)
        assert original.status == 200
        assert changed.body == b"[]"

    def test_body_helpers(self) -> None:
        r = Response(body='"héllo"')
        assert r.body_bytes == '"héllo"'.encode()
        assert r.text == '"héllo"'
        assert r.json == "héllo"

    def test_empty_json(self) -> None:
        assert Response().json is None

    def test_header_lookup(self) -> None:
        r = Response().with_header("Allow", "GET, POST")
        assert r.header("allow") == "GET, POST"
        assert r.header("x-missing") is None
