"""Tests for roost.http.headers — case-insensitive request headers."""

import pytest

from roost.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    return Headers(tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs))


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            _h(("Accept", "*/*"))["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "ACCEPT" in h
        assert "x-missing" not in h
        assert 42 not in h  # type: ignore[operator]

    def test_repeated_header(self) -> None:
        h = _h(("X-Forwarded-For", "1.1.1.1"), ("x-forwarded-for", "2.2.2.2"))
        assert h["x-forwarded-for"] == "1.1.1.1"
        assert h.get_list("X-Forwarded-For") == ["1.1.1.1", "2.2.2.2"]
        assert len(h) == 1
        assert list(h) == ["x-forwarded-for"]

    def test_get_default(self) -> None:
        h = Headers()
        assert h.get("accept") is None
        assert h.get("accept", "*/*") == "*/*"

    def test_from_dict(self) -> None:
        h = Headers.from_dict({"X-CSRF-Token": "abc"})
        assert h["x-csrf-token"] == "abc"
        assert h.raw == ((b"x-csrf-token", b"abc"),)
