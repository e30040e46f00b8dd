"""Error presentation: exceptions to exactly one Response.

Lookup order for an ``HTTPError``:

1. a handler registered with ``@app.error(ExcType)`` for the exception type
   (or a base class), then ``@app.error(status)``
2. the ``errors/<status>.html`` template, when the app ships one
3. a plain-text body
"""

from __future__ import annotations

import inspect
import logging
import traceback
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from roost._internal.invoke import invoke
from roost.config import AppConfig
from roost.errors import HTTPError
from roost.http.request import Request
from roost.http.response import Response
from roost.server.negotiation import negotiate

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("roost.server")

ErrorHandlers = Mapping[int | type, Callable[..., Any]]

_PLAIN = "text/plain; charset=utf-8"


def find_error_handler(
    handlers: ErrorHandlers, exc: Exception, status: int
) -> Callable[..., Any] | None:
    """Most specific registered handler for *exc*, else the one for *status*."""
    for cls in type(exc).__mro__:
        handler = handlers.get(cls)
        if handler is not None:
            return handler
        if cls is Exception:
            break
    return handlers.get(status)


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    kida_env: Environment | None,
) -> Response:
    """Invoke *handler* with zero, one (request) or two (request, exc) args."""
    arity = len(inspect.signature(handler).parameters)
    if arity >= 2:
        result = await invoke(handler, request, exc)
    elif arity == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)
    return negotiate(result, kida_env=kida_env)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Render an ``HTTPError`` raised anywhere in the request pipeline."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = find_error_handler(error_handlers, exc, exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, kida_env)
        # Handlers returning plain values keep the error's status
        if response.status == 200:
            response = response.with_status(exc.status)
    else:
        response = _default_page(exc.status, exc.detail, kida_env, config)

    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    """Log an unexpected exception and answer 500."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = find_error_handler(error_handlers, exc, 500)
    if handler is not None:
        try:
            response = await call_error_handler(handler, request, exc, kida_env)
        except Exception:
            logger.exception("Error handler for %s failed", type(exc).__name__)
        else:
            return response if response.status != 200 else response.with_status(500)

    if config.debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type=_PLAIN)
    return _default_page(500, "Internal Server Error", kida_env, config)


def _default_page(
    status: int,
    detail: str,
    kida_env: Environment | None,
    config: AppConfig,
) -> Response:
    detail = detail or f"Error {status}"
    if kida_env is not None:
        from roost.templating.integration import render_error_page

        try:
            page = render_error_page(kida_env, config, status, detail)
        except Exception:
            logger.exception("Rendering errors/%d.html failed", status)
            page = None
        if page is not None:
            return Response(body=page, status=status)
    return Response(body=detail, status=status, content_type=_PLAIN)
