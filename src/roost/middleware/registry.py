"""Registry of named middleware gates."""

from roost._internal.registry import Registry


class MiddlewareRegistry(Registry):
    """Maps gate names (``"AuthMiddleware"``) to zero-argument factories.

    A fresh gate is built for every request that needs it. Gates that
    share state across requests (counters, caches) get it from the
    factory::

        limiter = RateLimiter(max_requests=100, window=3600)
        app.middleware.register("RateLimitMiddleware", lambda: RateLimitMiddleware(limiter))

    ``discover()`` registers classes that define ``handle``.
    """

    kind = "middleware"

    __slots__ = ()

    def accepts(self, obj: type) -> bool:
        return callable(getattr(obj, "handle", None))
