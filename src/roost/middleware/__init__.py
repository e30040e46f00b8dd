"""Middleware: pipeline wrappers and named per-route gates.

Pipeline middleware is any ``async (request, next) -> Response``
callable added with ``app.add_middleware()``. Gates are objects with a
``handle(request) -> bool`` method, registered by name in the app's
``MiddlewareRegistry`` and listed on routes.

Built-in:
    SessionMiddleware -- Signed cookie sessions (pipeline)
    AuthMiddleware -- Require a logged-in session (gate)
    GuestMiddleware -- Require no login (gate)
    CsrfMiddleware -- Session token check on unsafe methods (gate)
    MaintenanceMiddleware -- 503 while in maintenance mode (gate)
    RateLimitMiddleware -- Per-client request budget (gate)
    CorsMiddleware -- Answer preflights, mark CORS responses (gate)
    CorsHeaders -- Add the headers CorsMiddleware recorded (pipeline)
    LanguageMiddleware -- Pick the request language (gate)
"""

from roost.middleware.auth import AuthMiddleware, GuestMiddleware
from roost.middleware.cors import CorsHeaders, CorsMiddleware
from roost.middleware.csrf import CsrfMiddleware
from roost.middleware.executor import Halt, MiddlewareExecutor
from roost.middleware.language import LanguageMiddleware
from roost.middleware.maintenance import MaintenanceMiddleware
from roost.middleware.protocol import Gate, Middleware, Next
from roost.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from roost.middleware.registry import MiddlewareRegistry
from roost.middleware.sessions import SessionConfig, SessionMiddleware

__all__ = [
    "AuthMiddleware",
    "CorsHeaders",
    "CorsMiddleware",
    "CsrfMiddleware",
    "Gate",
    "GuestMiddleware",
    "Halt",
    "LanguageMiddleware",
    "MaintenanceMiddleware",
    "Middleware",
    "MiddlewareExecutor",
    "MiddlewareRegistry",
    "Next",
    "RateLimitMiddleware",
    "RateLimiter",
    "SessionConfig",
    "SessionMiddleware",
]
