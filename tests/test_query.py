"""Tests for roost.http.query — query string splitting and parsing."""

import pytest

from roost.http.query import QueryParams, split_target


class TestSplitTarget:
    @pytest.mark.parametrize(
        ("target", "expected"),
        [
            ("/users/7", ("/users/7", "")),
            ("/users/7?tab=posts", ("/users/7", "tab=posts")),
            ("/a?b=1?c=2", ("/a", "b=1?c=2")),
            ("/page#top", ("/page", "")),
            ("/page?x=1#top", ("/page", "x=1")),
        ],
    )
    def test_split(self, target: str, expected: tuple[str, str]) -> None:
        assert split_target(target) == expected


class TestQueryParams:
    def test_first_value(self) -> None:
        q = QueryParams(b"tag=a&tag=b&page=2")
        assert q["tag"] == "a"
        assert q.get_list("tag") == ["a", "b"]
        assert q.get("page") == "2"

    def test_accepts_str(self) -> None:
        assert QueryParams("x=1")["x"] == "1"

    def test_blank_values_kept(self) -> None:
        q = QueryParams(b"q=")
        assert "q" in q
        assert q["q"] == ""

    def test_get_int(self) -> None:
        q = QueryParams(b"page=3&bad=x")
        assert q.get_int("page") == 3
        assert q.get_int("bad", 1) == 1
        assert q.get_int("missing") is None

    def test_raw(self) -> None:
        assert QueryParams(b"a=1").raw == b"a=1"
        assert QueryParams().raw == b""
        assert len(QueryParams()) == 0
