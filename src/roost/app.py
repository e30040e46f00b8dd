"""The roost application: setup surface and ASGI entry point."""

from __future__ import annotations

import importlib
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from roost._internal.asgi import Receive, Scope, Send
from roost._internal.invoke import invoke
from roost.config import AppConfig
from roost.controller import ControllerRegistry
from roost.dispatch import Dispatcher
from roost.logs import configure_logging
from roost.middleware.executor import MiddlewareExecutor
from roost.middleware.protocol import Middleware
from roost.middleware.registry import MiddlewareRegistry
from roost.routing.fallback import FallbackResolver
from roost.routing.router import Router
from roost.server.handler import Pipeline, handle_request

if TYPE_CHECKING:
    from kida import Environment

    from roost.middleware.rate_limit import RateLimiter
    from roost.routing.check import CheckResult

ErrorHandler = Callable[..., Any]
RouteDefinitions = Callable[[Router], Any]


class App:
    """The roost application.

    Mutable during setup: routes, controllers, middleware gates, pipeline
    middleware, error handlers, template globals and lifecycle hooks.
    Frozen on lifespan startup or the first request, after which every
    registration raises ``RuntimeError``.

    Usage::

        app = App(AppConfig.from_env())
        app.controllers.discover("myapp.controllers")
        app.use_builtin_gates()
        app.add_middleware(SessionMiddleware(SessionConfig(secret_key=key)))

        @app.routes
        def web(r: Router) -> None:
            r.get("/", "HomeController", "index")
            r.group(admin_routes, prefix="admin", middleware=["AuthMiddleware"])

    Thread safety:
        The freeze transition uses a Lock plus double check, so exactly one
        thread builds the runtime pipeline even when several workers see
        their first request at once.
    """

    __slots__ = (
        "_custom_kida_env",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_middleware_list",
        "_pipeline",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_globals",
        "config",
        "controllers",
        "middleware",
        "router",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router = Router()
        self.controllers = ControllerRegistry(self.config.controller_suffix)
        self.middleware = MiddlewareRegistry()
        self._middleware_list: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._custom_kida_env = kida_env

        # Compiled state, set during _freeze()
        self._pipeline: Pipeline | None = None
        self._kida_env: Environment | None = None

    # -- Route registration --

    def routes(self, definitions: RouteDefinitions | str) -> RouteDefinitions:
        """Replay a route definition function against the router.

        Accepts the function itself (also usable as a decorator) or an
        import string ``"package.module:function"``.
        """
        self._check_not_frozen()
        if isinstance(definitions, str):
            definitions = _import_string(definitions)
        definitions(self.router)
        return definitions

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler for a status code or exception type.

        Handlers take ``()``, ``(request)`` or ``(request, exc)``::

            @app.error(404)
            def not_found(request):
                return Template("errors/missing.html", path=request.path)
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add pipeline middleware. The first one added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def use_builtin_gates(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        cors_origins: Sequence[str] | None = None,
    ) -> None:
        """Register the bundled gates under their class names.

        ``CorsMiddleware`` needs ``CorsHeaders`` in the pipeline to add
        its headers to non-preflight responses.

        Also exposes ``csrf_token()``, ``csrf_field()`` and ``get_flash()``
        as template globals.
        """
        from roost.middleware.auth import AuthMiddleware, GuestMiddleware
        from roost.middleware.cors import DEFAULT_ORIGINS, CorsMiddleware
        from roost.middleware.csrf import CsrfMiddleware, csrf_field, csrf_token
        from roost.middleware.language import LanguageMiddleware
        from roost.middleware.maintenance import MaintenanceMiddleware
        from roost.middleware.rate_limit import RateLimiter, RateLimitMiddleware
        from roost.middleware.sessions import get_flash

        self._check_not_frozen()
        limiter = rate_limiter or RateLimiter()
        origins = tuple(cors_origins) if cors_origins is not None else DEFAULT_ORIGINS
        config = self.config

        self.middleware.register(AuthMiddleware)
        self.middleware.register(GuestMiddleware)
        self.middleware.register(CsrfMiddleware)
        self.middleware.register("MaintenanceMiddleware", lambda: MaintenanceMiddleware(config))
        self.middleware.register("RateLimitMiddleware", lambda: RateLimitMiddleware(limiter))
        self.middleware.register("CorsMiddleware", lambda: CorsMiddleware(origins))
        self.middleware.register(LanguageMiddleware)

        self._template_globals.setdefault("csrf_token", csrf_token)
        self._template_globals.setdefault("csrf_field", csrf_field)
        self._template_globals.setdefault("get_flash", get_flash)

    # -- Template integration --

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a kida template global."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run at lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run at lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._pipeline is not None
        await handle_request(scope, receive, send, self._pipeline)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        self._ensure_frozen()

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif message["type"] == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Validation --

    def check(self) -> CheckResult:
        """Validate the route table against the registries.

        Freezes the app if needed, prints the report and raises
        ``SystemExit(1)`` when there are errors.
        """
        result = self.check_routes()
        print(result.summary())
        if not result.ok:
            raise SystemExit(1)
        return result

    def check_routes(self) -> CheckResult:
        """Validate the route table without printing or exiting."""
        from roost.routing.check import check_routes

        self._ensure_frozen()
        return check_routes(
            self.router,
            self.controllers,
            self.middleware,
            fallback_middleware=self.config.fallback_middleware,
        )

    # -- Internal --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_frozen(self) -> None:
        """Freeze exactly once, with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the runtime pipeline. Caller holds ``_freeze_lock``."""
        configure_logging(self.config)

        if self._custom_kida_env is not None:
            env = self._custom_kida_env
            for name, value in self._template_globals.items():
                env.add_global(name, value)
        else:
            from roost.templating.integration import create_environment

            env = create_environment(self.config, self._template_globals)
        self._kida_env = env

        self.router.freeze()
        self.controllers.freeze()
        self.middleware.freeze()

        fallback = (
            FallbackResolver.from_config(self.config) if self.config.fallback_routing else None
        )
        self._pipeline = Pipeline(
            config=self.config,
            router=self.router,
            executor=MiddlewareExecutor(self.middleware, kida_env=env),
            dispatcher=Dispatcher(self.controllers, kida_env=env),
            fallback=fallback,
            middleware=tuple(self._middleware_list),
            error_handlers=dict(self._error_handlers),
            kida_env=env,
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, controllers and middleware before the first request."
            )
            raise RuntimeError(msg)


def _import_string(target: str) -> Any:
    module_name, _, attr = target.partition(":")
    if not attr:
        msg = f"Expected 'module:attribute', got {target!r}"
        raise ValueError(msg)
    return getattr(importlib.import_module(module_name), attr)
