"""Request-scoped context via ContextVar.

``request_var`` holds the request being served and ``g`` is a per-request
attribute namespace. The ASGI handler sets the request before routing
and resets it afterwards; controllers read it through ``self.request``.
"""

from contextvars import ContextVar
from typing import Any

from roost.http.request import Request

request_var: ContextVar[Request] = ContextVar("roost_request")
"""The current request. Set by the ASGI handler before routing."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


class _RequestGlobals:
    """Attribute namespace scoped to the current request.

    Usage::

        from roost.context import g

        # in a gate
        g.user_id = session["user_id"]

        # in an action
        user_id = g.get("user_id")
    """

    __slots__ = ("_store",)

    def __init__(self) -> None:
        object.__setattr__(self, "_store", ContextVar("roost_g", default=None))

    def _data(self) -> dict[str, Any]:
        store: ContextVar[dict[str, Any] | None] = object.__getattribute__(self, "_store")
        data = store.get()
        if data is None:
            data = {}
            store.set(data)
        return data

    def __getattr__(self, name: str) -> Any:
        try:
            return self._data()[name]
        except KeyError:
            msg = f"'g' has no attribute {name!r} in the current request"
            raise AttributeError(msg) from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._data()[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._data()[name]
        except KeyError:
            msg = f"'g' has no attribute {name!r} in the current request"
            raise AttributeError(msg) from None

    def __contains__(self, name: str) -> bool:
        return name in self._data()

    def get(self, name: str, default: Any = None) -> Any:
        return self._data().get(name, default)

    def reset(self) -> None:
        """Drop every attribute. Called by the handler after each request."""
        store: ContextVar[dict[str, Any] | None] = object.__getattribute__(self, "_store")
        store.set(None)


g = _RequestGlobals()
