"""Middleware shapes.

Two kinds of middleware exist:

**Pipeline middleware** wraps every request the app serves, whether or
not a route matched::

    async def timing(request: Request, next: Next) -> Response:
        start = time.monotonic()
        response = await next(request)
        return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

**Gates** are named per-route checks, referenced by string in route
definitions and resolved through the app's ``MiddlewareRegistry``::

    class AdminMiddleware:
        def handle(self, request: Request) -> bool:
            return get_session().get("role") == "admin"

        def redirect_to(self, request: Request) -> str:
            return "/login"

A gate needs ``handle``. ``on_failure`` and ``redirect_to`` are optional
and consulted, in that order, when ``handle`` returns ``False``. Any of
them may be ``async def``. No base class required.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias, runtime_checkable

from roost.http.request import Request
from roost.http.response import Response

# The next handler in the pipeline chain
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Pipeline middleware: functions or callable objects."""

    async def __call__(self, request: Request, next: Next) -> Response: ...


@runtime_checkable
class Gate(Protocol):
    """Per-route middleware gate.

    ``handle`` returns ``True`` to let the request through. Optional
    failure hooks, looked up by name at rejection time::

        on_failure(request) -> response value | None
        redirect_to(request) -> str
    """

    def handle(self, request: Request) -> Any: ...
