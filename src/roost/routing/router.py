"""Ordered route table with group support.

Routes are registered during setup, usually by replaying a route
definition function against the router, and the table is frozen
together with the app. Matching walks the patterns of one method in
registration order; the first one that matches wins.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from roost.http.query import split_target
from roost.routing.pattern import normalize
from roost.routing.route import MatchedRoute, Route

logger = logging.getLogger("roost.routing")

METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")


@dataclass(frozen=True, slots=True)
class _Group:
    prefix: str
    middleware: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Overwrite:
    """A registration that replaced an earlier one for the same key."""

    previous: Route
    replacement: Route


class Router:
    """Per-method ordered pattern table.

    Usage::

        router = Router()
        router.get("/", "HomeController", "index")
        router.get("users/{id}", "UserController", "show", ["AuthMiddleware"])

        def admin(r: Router) -> None:
            r.get("dashboard", "AdminController", "dashboard")

        router.group(admin, prefix="admin", middleware=["AuthMiddleware"])

        match = router.match("GET", "/users/42")
        # MatchedRoute(route=..., params=("42",))

    Registering the same method and normalized pattern twice keeps the
    original position and replaces the target (last write wins).
    """

    __slots__ = ("_frozen", "_groups", "_overwrites", "_tables")

    def __init__(self) -> None:
        # method -> normalized pattern -> route; dicts keep insertion order
        self._tables: dict[str, dict[str, Route]] = {}
        self._groups: list[_Group] = []
        self._overwrites: list[Overwrite] = []
        self._frozen = False

    # -- Registration --

    def add_route(
        self,
        method: str,
        pattern: str,
        controller: str,
        action: str,
        middleware: Iterable[str] = (),
    ) -> Route:
        """Register one route under the active group frames."""
        if self._frozen:
            msg = (
                f"Cannot register route {method.upper()} {pattern!r} after the "
                "router has been frozen."
            )
            raise RuntimeError(msg)

        prefix = "/".join(g.prefix for g in self._groups if g.prefix)
        full_pattern = _join(prefix, pattern)
        stack: list[str] = []
        for group in self._groups:
            stack.extend(group.middleware)
        stack.extend(middleware)

        route = Route(
            method=method.upper(),
            pattern=full_pattern,
            controller=controller,
            action=action,
            middleware=tuple(stack),
        )
        table = self._tables.setdefault(route.method, {})
        previous = table.get(route.key)
        if previous is not None:
            logger.debug(
                "Route %s %s re-registered: %s replaces %s",
                route.method,
                route.key,
                route.target,
                previous.target,
            )
            self._overwrites.append(Overwrite(previous, route))
        table[route.key] = route
        return route

    def get(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> Route:
        """Register a GET route."""
        return self.add_route("GET", pattern, controller, action, middleware)

    def post(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> Route:
        """Register a POST route."""
        return self.add_route("POST", pattern, controller, action, middleware)

    def put(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> Route:
        """Register a PUT route."""
        return self.add_route("PUT", pattern, controller, action, middleware)

    def delete(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> Route:
        """Register a DELETE route."""
        return self.add_route("DELETE", pattern, controller, action, middleware)

    def patch(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> Route:
        """Register a PATCH route."""
        return self.add_route("PATCH", pattern, controller, action, middleware)

    def options(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> Route:
        """Register an OPTIONS route, typically for CORS preflights."""
        return self.add_route("OPTIONS", pattern, controller, action, middleware)

    def any(
        self, pattern: str, controller: str, action: str, middleware: Iterable[str] = ()
    ) -> list[Route]:
        """Register the same target for every method in ``METHODS``."""
        names = tuple(middleware)
        return [self.add_route(m, pattern, controller, action, names) for m in METHODS]

    def group(
        self,
        register: Callable[["Router"], object],
        *,
        prefix: str = "",
        middleware: Iterable[str] = (),
    ) -> None:
        """Run *register* with a group frame pushed.

        Routes registered inside get *prefix* prepended and *middleware*
        placed before their own. Groups nest; the frame is popped even
        when *register* raises.
        """
        with self._frame(prefix, middleware):
            register(self)

    @contextmanager
    def _frame(self, prefix: str, middleware: Iterable[str]) -> Iterator[None]:
        self._groups.append(_Group(prefix.strip("/"), tuple(middleware)))
        try:
            yield
        finally:
            self._groups.pop()

    def freeze(self) -> None:
        """Make the table read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Matching --

    def match(self, method: str, path: str) -> MatchedRoute | None:
        """Find the first route for *method* matching *path*.

        Any ``?query`` part of *path* is ignored. Returns ``None`` when
        the method has no routes or no pattern matches.
        """
        table = self._tables.get(method.upper())
        if not table:
            return None

        raw = split_target(path)[0].strip("/")
        key = normalize(raw)
        for route in table.values():
            if route.key == key:
                return MatchedRoute(route)
            m = route.regex.fullmatch(raw)
            if m is not None:
                return MatchedRoute(route, m.groups())
        return None

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """All routes, grouped by method, each in registration order."""
        return [route for table in self._tables.values() for route in table.values()]

    @property
    def overwrites(self) -> list[Overwrite]:
        """Registrations that replaced an earlier route."""
        return list(self._overwrites)

    def methods(self) -> list[str]:
        """Methods that have at least one route."""
        return list(self._tables)

    def __len__(self) -> int:
        return sum(len(table) for table in self._tables.values())


def _join(prefix: str, pattern: str) -> str:
    pattern = pattern.strip("/")
    if not prefix:
        return pattern
    if not pattern:
        return prefix
    return f"{prefix}/{pattern}"
