"""Route table validation.

Routes refer to controllers, actions and middleware by name, so typos
only surface as 404s and 500s at request time. ``check_routes()`` walks
the table ahead of time and reports:

- ERROR: a route names an unregistered controller, a missing action or
  an unregistered middleware
- WARNING: a registration replaced an earlier one for the same method
  and pattern, or a literal route can never match because an earlier
  pattern already covers it

Usage::

    result = check_routes(app.router, app.controllers, app.middleware)
    print(result.summary())

    # or
    #   roost check myapp:app
"""

from dataclasses import dataclass, field
from enum import Enum

from roost.controller import ControllerRegistry, find_action
from roost.middleware.registry import MiddlewareRegistry
from roost.routing.pattern import has_placeholders
from roost.routing.route import Route
from roost.routing.router import Router


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class RouteIssue:
    """A single problem found in the route table."""

    severity: Severity
    category: str
    message: str
    route: str | None = None


@dataclass(slots=True)
class CheckResult:
    issues: list[RouteIssue] = field(default_factory=list)
    routes_checked: int = 0

    @property
    def errors(self) -> list[RouteIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[RouteIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable report."""
        lines = [f"Checked {self.routes_checked} routes."]
        if not self.issues:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            where = f" [{issue.route}]" if issue.route else ""
            label = issue.severity.value.upper()
            lines.append(f"  {label} {issue.category}{where}: {issue.message}")
        return "\n".join(lines)


def _label(route: Route) -> str:
    return f"{route.method} /{route.key}"


def check_routes(
    router: Router,
    controllers: ControllerRegistry,
    middleware: MiddlewareRegistry,
    *,
    fallback_middleware: tuple[str, ...] = (),
) -> CheckResult:
    """Validate every route in *router* against the registries."""
    result = CheckResult(routes_checked=len(router))
    issues = result.issues

    for route in router.routes:
        issues.extend(_check_target(route, controllers))
        issues.extend(
            RouteIssue(
                Severity.ERROR,
                "middleware",
                f"Middleware {name!r} is not registered.",
                route=_label(route),
            )
            for name in route.middleware
            if name not in middleware
        )

    issues.extend(
        RouteIssue(
            Severity.ERROR,
            "middleware",
            f"Fallback middleware {name!r} is not registered.",
        )
        for name in fallback_middleware
        if name not in middleware
    )

    issues.extend(
        RouteIssue(
            Severity.WARNING,
            "overwrite",
            f"{ow.replacement.target} replaced {ow.previous.target}.",
            route=_label(ow.replacement),
        )
        for ow in router.overwrites
    )

    issues.extend(_shadowed(router))
    return result


def _check_target(route: Route, controllers: ControllerRegistry) -> list[RouteIssue]:
    factory = controllers.resolve(route.controller)
    if factory is None:
        return [
            RouteIssue(
                Severity.ERROR,
                "controller",
                f"Controller {route.controller!r} is not registered.",
                route=_label(route),
            )
        ]
    # Actions can only be checked ahead of time when the factory is the class
    if isinstance(factory, type) and find_action(factory, route.action) is None:
        return [
            RouteIssue(
                Severity.ERROR,
                "action",
                f"{route.controller} has no action {route.action!r}.",
                route=_label(route),
            )
        ]
    return []


def _shadowed(router: Router) -> list[RouteIssue]:
    issues: list[RouteIssue] = []
    by_method: dict[str, list[Route]] = {}
    for route in router.routes:
        by_method.setdefault(route.method, []).append(route)

    for routes in by_method.values():
        for i, route in enumerate(routes):
            if has_placeholders(route.key):
                continue
            for earlier in routes[:i]:
                if earlier.regex.fullmatch(route.key):
                    issues.append(
                        RouteIssue(
                            Severity.WARNING,
                            "shadowed",
                            f"Unreachable: /{earlier.key} ({earlier.target}) "
                            "is registered first and matches the same path.",
                            route=_label(route),
                        )
                    )
                    break
    return issues
