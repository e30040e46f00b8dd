"""Invoke helpers: call sync or async callables uniformly.

Controller actions, middleware ``handle()`` / ``on_failure()`` /
``redirect_to()``, error handlers and lifecycle hooks may all be ``def``
or ``async def``. This module keeps the sync/async check in one place.

Usage::

    from roost._internal.invoke import invoke

    allowed = await invoke(gate.handle, request)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine.

    Works with both sync and async callables::

        class UserController(Controller):
            # sync: returns immediately, no await needed
            def show(self, user_id):
                return self.view("users/show.html", user_id=user_id)

            # async: returns coroutine, awaited automatically
            async def update(self, user_id):
                form = await self.request.form()
                ...
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
