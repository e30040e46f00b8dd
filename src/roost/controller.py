"""Controller base class and controller registry.

A controller groups related actions. Any public method is an action;
the router and the fallback resolver refer to it by class name and
method name::

    class UserController(Controller):
        def show(self, user_id):
            return self.view("users/show.html", user_id=user_id)

        async def update(self, user_id):
            form = await self.request.form()
            ...
            return self.redirect(f"/user/show/{user_id}")

A fresh instance is built for every request, so instance attributes
never leak between requests.
"""

import re
from typing import Any

from roost._internal.registry import Registry
from roost.context import get_request
from roost.errors import HTTPError, NotFound
from roost.http.request import Request
from roost.http.response import Redirect, Response
from roost.middleware import sessions
from roost.templating.returns import Fragment, Template

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """``editProfile`` -> ``edit_profile``."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


class Controller:
    """Optional base class with response helpers.

    Controllers need not inherit from it; any class whose instances
    expose the action methods works. Helpers defined here are never
    dispatchable as actions.
    """

    @property
    def request(self) -> Request:
        """The request being served."""
        return get_request()

    @property
    def session(self) -> dict[str, Any]:
        """The signed cookie session (requires ``SessionMiddleware``)."""
        return sessions.get_session()

    def view(self, name: str, /, **context: Any) -> Template:
        return Template(name, **context)

    def fragment(self, template_name: str, block_name: str, /, **context: Any) -> Fragment:
        return Fragment(template_name, block_name, **context)

    def json(self, data: Any, status: int = 200) -> Response:
        return Response.json(data, status=status)

    def redirect(self, url: str, status: int = 302) -> Redirect:
        return Redirect(url, status=status)

    def back(self, default: str = "/") -> Redirect:
        """Redirect to the Referer, or *default* without one."""
        return Redirect(self.request.headers.get("referer") or default)

    def flash(self, kind: str, message: str) -> None:
        sessions.flash(kind, message)

    def get_flash(self, kind: str) -> str | None:
        return sessions.get_flash(kind)

    def abort(self, status: int, detail: str = "") -> None:
        """Stop the action with an HTTP error response."""
        raise HTTPError(status=status, detail=detail)

    def not_found(self, detail: str = "Not Found") -> None:
        raise NotFound(detail)


_RESERVED: frozenset[str] = frozenset(dir(Controller))


def find_action(cls: type, name: str) -> str | None:
    """Return the attribute name implementing action *name* on *cls*.

    Tries *name* as given, then its snake_case spelling. Private names
    and ``Controller`` helpers are never actions.
    """
    for candidate in dict.fromkeys((name, snake_case(name))):
        if not candidate or candidate.startswith("_") or candidate in _RESERVED:
            continue
        attr = getattr(cls, candidate, None)
        if callable(attr):
            return candidate
    return None


class ControllerRegistry(Registry):
    """Maps controller identifiers to factories.

    ``discover()`` picks up classes whose names end with ``suffix``
    (``"Controller"`` by default)::

        app.controllers.discover("myapp.controllers")
    """

    kind = "controller"

    __slots__ = ("suffix",)

    def __init__(self, suffix: str = "Controller") -> None:
        super().__init__()
        self.suffix = suffix

    def accepts(self, obj: type) -> bool:
        return obj is not Controller and obj.__name__.endswith(self.suffix)
