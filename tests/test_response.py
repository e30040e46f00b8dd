"""Tests for roost.http.response — chainable immutable responses."""

from roost.http.response import Redirect, Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.content_type == "text/html; charset=utf-8"
        assert response.body_bytes == b""

    def test_json(self) -> None:
        response = Response.json({"a": 1}, status=201)
        assert response.status == 201
        assert response.content_type.startswith("application/json")
        assert response.text == '{"a": 1}'

    def test_with_methods_return_new(self) -> None:
        base = Response("hi")
        changed = base.with_status(404).with_header("X-A", "1").with_content_type("text/plain")
        assert base.status == 200
        assert base.headers == ()
        assert changed.status == 404
        assert changed.header("x-a") == "1"
        assert changed.content_type == "text/plain"

    def test_with_headers(self) -> None:
        response = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert response.headers == (("X-A", "1"), ("X-B", "2"))

    def test_header_lookup(self) -> None:
        response = Response().with_header("Location", "/a").with_header("location", "/b")
        assert response.header("LOCATION") == "/a"
        assert response.header("missing") is None
        assert response.header("missing", "x") == "x"

    def test_cookies(self) -> None:
        response = Response().with_cookie("sid", "1", max_age=10).without_cookie("old")
        assert [c.name for c in response.cookies] == ["sid", "old"]
        assert response.cookies[1].max_age == 0

    def test_bytes_body(self) -> None:
        response = Response(b"\xc3\xa9")
        assert response.body_bytes == b"\xc3\xa9"
        assert response.text == "é"


class TestRedirect:
    def test_defaults(self) -> None:
        redirect = Redirect("/login")
        assert redirect.status == 302
        assert redirect.headers == ()
