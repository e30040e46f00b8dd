"""ASGI handler: the front controller.

The only component that touches raw ASGI. Builds a Request from the
scope, runs it through the pipeline middleware, then routes it:

    matched route  -> route gates -> dispatch
    no match       -> fallback resolver -> (fallback gates) -> dispatch

Every outcome, including errors, ends in exactly one response.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextvars import Token
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roost._internal.asgi import Receive, Scope, Send
from roost.config import AppConfig
from roost.context import g, request_var
from roost.dispatch import Dispatcher
from roost.errors import HTTPError, NotFound
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.executor import MiddlewareExecutor
from roost.middleware.protocol import Next
from roost.routing.fallback import FallbackResolver
from roost.routing.router import Router
from roost.server.errors import ErrorHandlers, handle_http_error, handle_internal_error
from roost.server.sender import send_response

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("roost.server")


@dataclass(frozen=True, slots=True)
class Pipeline:
    """Everything the handler needs, assembled once when the app freezes."""

    config: AppConfig
    router: Router
    executor: MiddlewareExecutor
    dispatcher: Dispatcher
    fallback: FallbackResolver | None
    middleware: tuple[Callable[..., Any], ...] = ()
    error_handlers: ErrorHandlers | None = None
    kida_env: Environment | None = None


async def route_request(request: Request, pipeline: Pipeline) -> Response:
    """Match, gate and dispatch one request."""
    matched = pipeline.router.match(request.method, request.path)
    if matched is not None:
        route = matched.route
        halt = await pipeline.executor.execute(route.middleware, request)
        if halt is not None:
            return halt.response
        request = request.with_path_params(matched.params)
        request_var.set(request)
        return await pipeline.dispatcher.dispatch(
            route.controller, route.action, matched.params, request
        )

    if pipeline.fallback is None:
        logger.info("No route for %s %s", request.method, request.path)
        raise NotFound()

    target = pipeline.fallback.resolve(request.path)
    logger.debug(
        "Fallback %s %s -> %s.%s%s",
        request.method,
        request.path,
        target.controller,
        target.action,
        target.params,
    )
    if pipeline.config.fallback_middleware:
        halt = await pipeline.executor.execute(pipeline.config.fallback_middleware, request)
        if halt is not None:
            return halt.response
    request = request.with_path_params(target.params)
    request_var.set(request)
    return await pipeline.dispatcher.dispatch(
        target.controller, target.action, target.params, request
    )


def build_chain(
    middleware: Sequence[Callable[..., Any]],
    endpoint: Next,
) -> Next:
    """Wrap *endpoint* in *middleware*, first entry outermost."""
    handler = endpoint
    for mw in reversed(middleware):

        async def call_next(req: Request, _mw: Any = mw, _next: Next = handler) -> Response:
            return await _mw(req, _next)

        handler = call_next
    return handler


async def handle_request(scope: Scope, receive: Receive, send: Send, pipeline: Pipeline) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token: Token[Request] = request_var.set(request)
    error_handlers = pipeline.error_handlers or {}

    try:

        async def endpoint(req: Request) -> Response:
            return await route_request(req, pipeline)

        response = await build_chain(pipeline.middleware, endpoint)(request)
    except HTTPError as exc:
        response = await handle_http_error(
            exc, request, error_handlers, pipeline.kida_env, pipeline.config
        )
    except Exception as exc:
        response = await handle_internal_error(
            exc, request, error_handlers, pipeline.kida_env, pipeline.config
        )
    finally:
        g.reset()
        request_var.reset(token)

    await send_response(response, send, method=request.method)
