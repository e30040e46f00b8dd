"""Routing: ordered pattern table, matcher and convention fallback."""

from roost.routing.fallback import FallbackResolver, FallbackTarget
from roost.routing.pattern import compile_pattern, normalize
from roost.routing.route import MatchedRoute, Route
from roost.routing.router import Router

__all__ = [
    "FallbackResolver",
    "FallbackTarget",
    "MatchedRoute",
    "Route",
    "Router",
    "compile_pattern",
    "normalize",
]
