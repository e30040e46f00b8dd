"""Route and MatchedRoute frozen dataclasses."""

import re
from dataclasses import dataclass, field

from roost.routing.pattern import compile_pattern, normalize, placeholders


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    ``pattern`` is the path as written at registration (after group
    prefixes were applied); ``key`` is its normalized form, which is what
    the router compares against. The regex is compiled once, here.
    """

    method: str
    pattern: str
    controller: str
    action: str
    middleware: tuple[str, ...] = ()
    key: str = field(init=False, repr=False)
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        key = normalize(self.pattern)
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "regex", compile_pattern(key))

    @property
    def param_names(self) -> tuple[str, ...]:
        """Placeholder names in declaration order."""
        return tuple(ph.name for ph in placeholders(self.key))

    @property
    def target(self) -> str:
        """``Controller@action`` label, as used in listings."""
        return f"{self.controller}@{self.action}"


@dataclass(frozen=True, slots=True)
class MatchedRoute:
    """Result of a successful route match.

    ``params`` holds the extracted values in placeholder order.
    """

    route: Route
    params: tuple[str, ...] = ()
