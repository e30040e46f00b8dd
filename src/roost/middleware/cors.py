"""CORS gate and its response-header companion.

``CorsMiddleware`` is listed on routes like any other gate. It answers
``OPTIONS`` preflights itself with a 200 carrying the CORS headers; for
other methods it passes and records the headers in ``g``.
``CorsHeaders`` is pipeline middleware that copies those recorded
headers onto the final response, so only routes behind the gate get
them::

    app.add_middleware(CorsHeaders())
    app.use_builtin_gates()

    def api(r):
        r.group(lambda r: r.get("items", "ItemController", "index"),
                prefix="api", middleware=["CorsMiddleware"])

Origins outside the allow-list are not echoed back; they get the first
allowed origin, which browsers then reject.
"""

from collections.abc import Sequence

from roost.context import g
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.protocol import Next

DEFAULT_ORIGINS: tuple[str, ...] = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "https://yourdomain.com",
)
ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With"

# Key in ``g`` holding the headers recorded by the gate
G_KEY = "cors_headers"


def cors_headers(request: Request, allowed_origins: Sequence[str]) -> dict[str, str]:
    """The CORS headers to send for *request*."""
    origin = request.headers.get("origin")
    if origin not in allowed_origins:
        origin = allowed_origins[0] if allowed_origins else "null"
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Credentials": "true",
        "Vary": "Origin",
    }


class CorsMiddleware:
    """Gate that answers preflights and marks the request for CORS headers."""

    __slots__ = ("allowed_origins",)

    def __init__(self, allowed_origins: Sequence[str] = DEFAULT_ORIGINS) -> None:
        self.allowed_origins = tuple(allowed_origins)

    def handle(self, request: Request) -> bool:
        if request.method == "OPTIONS":
            # Rejecting hands the preflight to on_failure
            return False
        setattr(g, G_KEY, cors_headers(request, self.allowed_origins))
        return True

    def on_failure(self, request: Request) -> Response:
        return Response(body="").with_headers(cors_headers(request, self.allowed_origins))


class CorsHeaders:
    """Pipeline middleware adding the headers a ``CorsMiddleware`` gate recorded."""

    async def __call__(self, request: Request, next: Next) -> Response:
        response = await next(request)
        headers = g.get(G_KEY)
        if headers:
            response = response.with_headers(headers)
        return response
