"""Query strings: splitting them off request targets and parsing them.

The query portion of a request target never takes part in route
matching; ``split_target()`` separates it before the router sees the
path.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


def split_target(target: str) -> tuple[str, str]:
    """Split ``"/users/7?tab=posts"`` into ``("/users/7", "tab=posts")``.

    Also drops a ``#fragment`` if a client sent one.
    """
    target = target.split("#", 1)[0]
    path, _, query = target.partition("?")
    return path, query


class QueryParams(Mapping[str, str]):
    """Parsed, read-only query string parameters.

    ``params["page"]`` returns the first value; ``get_list()`` returns
    all of them (``?tag=a&tag=b``).
    """

    __slots__ = ("_data", "_raw")

    _data: dict[str, list[str]]
    _raw: bytes

    def __init__(self, query_string: bytes | str = b"") -> None:
        if isinstance(query_string, str):
            query_string = query_string.encode("latin-1")
        object.__setattr__(self, "_raw", query_string)
        object.__setattr__(
            self,
            "_data",
            parse_qs(query_string.decode("latin-1"), keep_blank_values=True),
        )

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QueryParams({dict(self.items())!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, ()))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    @property
    def raw(self) -> bytes:
        """The undecoded query string."""
        return self._raw
