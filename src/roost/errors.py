"""Roost exception hierarchy.

Shared across Router, Dispatcher, middleware executor and the ASGI
handler so every module raises and catches the same types.
"""

from dataclasses import dataclass


class RoostError(Exception):
    """Base for all roost-specific errors."""


class ConfigurationError(RoostError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()`` at startup.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(RoostError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher, middleware executor, or controllers. The
    ASGI handler catches these and renders exactly one error response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing can serve the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ControllerNotFound(NotFound):  # noqa: N818
    """404: the route names a controller that is not registered."""

    def __init__(self, controller: str) -> None:
        super().__init__(f"Controller {controller!r} does not exist.")


class ActionNotFound(NotFound):  # noqa: N818
    """404: the controller exists but has no such action."""

    def __init__(self, controller: str, action: str) -> None:
        super().__init__(f"Action {action!r} does not exist on {controller!r}.")


class DispatchError(NotFound):
    """404: the action cannot accept the extracted path parameters."""

    def __init__(self, controller: str, action: str, reason: str) -> None:
        super().__init__(f"Cannot dispatch {controller}.{action}: {reason}")


class Forbidden(HTTPError):  # noqa: N818
    """403: a middleware gate rejected the request."""

    def __init__(self, detail: str = "Access denied.") -> None:
        super().__init__(status=403, detail=detail)


class MiddlewareNotFound(HTTPError):  # noqa: N818
    """500: a route references a middleware name nobody registered.

    A deployment defect rather than a user-reachable condition.
    """

    def __init__(self, name: str) -> None:
        super().__init__(status=500, detail=f"Middleware {name!r} does not exist.")


class InvalidMiddleware(HTTPError):  # noqa: N818
    """500: a registered middleware has no ``handle`` method."""

    def __init__(self, name: str) -> None:
        super().__init__(status=500, detail=f"Middleware {name!r} does not have a handle method.")
