"""Controller/action dispatch.

Resolves a controller identifier through the ``ControllerRegistry``,
finds the action, builds a fresh controller and calls the action with
the path parameters as positional arguments. The return value goes
through content negotiation.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from roost._internal.invoke import invoke
from roost.controller import ControllerRegistry, find_action
from roost.errors import ActionNotFound, ControllerNotFound, DispatchError
from roost.http.request import Request
from roost.http.response import Response
from roost.server.negotiation import negotiate

if TYPE_CHECKING:
    from kida import Environment

logger = logging.getLogger("roost.routing")


class Dispatcher:
    """Turns (controller, action, params) into a Response."""

    __slots__ = ("_controllers", "_kida_env")

    def __init__(
        self,
        controllers: ControllerRegistry,
        *,
        kida_env: Environment | None = None,
    ) -> None:
        self._controllers = controllers
        self._kida_env = kida_env

    async def dispatch(
        self,
        controller: str,
        action: str,
        params: Sequence[str],
        request: Request,
    ) -> Response:
        """Invoke ``controller.action(*params)`` and negotiate the result.

        Raises ``ControllerNotFound``, ``ActionNotFound`` or
        ``DispatchError`` (all 404, all logged). Exceptions raised by
        the action itself propagate unchanged.
        """
        factory = self._controllers.resolve(controller)
        if factory is None:
            logger.error(
                "Controller not found: %s (%s %s)", controller, request.method, request.path
            )
            raise ControllerNotFound(controller)

        # Check classes before building an instance; other factories after
        if isinstance(factory, type):
            method_name = self._action_name(factory, controller, action, request)
            instance = factory()
        else:
            instance = factory()
            method_name = self._action_name(type(instance), controller, action, request)

        handler = getattr(instance, method_name)
        args = tuple(params)
        self._check_arity(handler, args, controller, method_name)

        result = await invoke(handler, *args)
        return negotiate(result, kida_env=self._kida_env)

    @staticmethod
    def _action_name(cls: type, controller: str, action: str, request: Request) -> str:
        name = find_action(cls, action)
        if name is None:
            logger.error(
                "Action not found: %s.%s (%s %s)", controller, action, request.method, request.path
            )
            raise ActionNotFound(controller, action)
        return name

    @staticmethod
    def _check_arity(handler: Any, args: tuple[str, ...], controller: str, action: str) -> None:
        try:
            sig = inspect.signature(handler)
        except (TypeError, ValueError):
            # Builtins and some C callables expose no signature
            return
        try:
            sig.bind(*args)
        except TypeError as exc:
            logger.error(
                "Cannot dispatch %s.%s with %d params: %s", controller, action, len(args), exc
            )
            raise DispatchError(controller, action, str(exc)) from exc
