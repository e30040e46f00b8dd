"""Ordered, short-circuiting execution of per-route gates.

For a matched route the executor resolves each middleware name in
order, builds a fresh gate and calls ``handle(request)``. The first
gate that returns a falsy value stops the chain; later gates are never
constructed. The rejection is turned into a response from, in order of
preference:

1. ``on_failure(request)`` when defined and it returns something
   other than ``None``
2. ``redirect_to(request)`` when defined (302)
3. a generic 403 "Access denied."

The result is a ``Halt`` carrying that response, which the handler
returns as-is without dispatching.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from roost._internal.invoke import invoke
from roost.errors import Forbidden, InvalidMiddleware, MiddlewareNotFound
from roost.http.request import Request
from roost.http.response import Redirect, Response
from roost.middleware.protocol import Gate
from roost.middleware.registry import MiddlewareRegistry
from roost.server.negotiation import negotiate

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("roost.routing")


@dataclass(frozen=True, slots=True)
class Halt:
    """A gate rejected the request; ``response`` is final."""

    response: Response
    middleware: str = ""


class MiddlewareExecutor:
    """Runs gate chains against a ``MiddlewareRegistry``."""

    __slots__ = ("_kida_env", "_registry")

    def __init__(
        self,
        registry: MiddlewareRegistry,
        *,
        kida_env: Environment | None = None,
    ) -> None:
        self._registry = registry
        self._kida_env = kida_env

    async def execute(self, names: Iterable[str], request: Request) -> Halt | None:
        """Run the gates named in *names* in order.

        Returns ``None`` when every gate passed, else a ``Halt``.

        Raises ``MiddlewareNotFound`` for an unregistered name and
        ``InvalidMiddleware`` for a gate without ``handle``; both are
        logged here and surface as 500 responses.
        """
        for name in names:
            gate = self._build(name)
            if await invoke(gate.handle, request):
                continue
            logger.info("Middleware %s rejected %s %s", name, request.method, request.path)
            return Halt(await self._rejection(gate, request), middleware=name)
        return None

    def _build(self, name: str) -> Gate:
        gate = self._registry.create(name)
        if gate is None:
            logger.error("Middleware not found: %s", name)
            raise MiddlewareNotFound(name)
        if not isinstance(gate, Gate) or not callable(gate.handle):
            logger.error("Middleware %s does not have a handle method", name)
            raise InvalidMiddleware(name)
        return gate

    async def _rejection(self, gate: Gate, request: Request) -> Response:
        on_failure = getattr(gate, "on_failure", None)
        if on_failure is not None:
            value = await invoke(on_failure, request)
            if value is not None:
                return negotiate(value, kida_env=self._kida_env)

        redirect_to = getattr(gate, "redirect_to", None)
        if redirect_to is not None:
            target = await invoke(redirect_to, request)
            if not isinstance(target, Redirect):
                target = Redirect(target)
            return negotiate(target)

        denied = Forbidden()
        return Response(
            body=denied.detail,
            status=denied.status,
            content_type="text/plain; charset=utf-8",
        )
