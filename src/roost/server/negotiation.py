"""Content negotiation: maps action return values to Response objects.

Controller actions, middleware failure handlers, and error handlers
all return plain values; ``negotiate()`` turns them into exactly one
``Response``. isinstance-based dispatch, no magic, fully predictable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from roost.errors import ConfigurationError
from roost.http.response import Redirect, Response
from roost.templating.returns import Fragment, Template

if TYPE_CHECKING:
    from kida import Environment


def negotiate(value: Any, *, kida_env: Environment | None = None) -> Response:
    """Convert a return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``Redirect``            -> 3xx with Location header
    3. ``Template``            -> render via kida
    4. ``Fragment``            -> render one block via kida
    5. ``None``                -> empty 200
    6. ``str``                 -> 200, text/html
    7. ``bytes``               -> 200, application/octet-stream
    8. ``dict`` / ``list``     -> 200, application/json
    9. ``(value, int)``        -> negotiate value, override status
    10. ``(value, int, dict)`` -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case Template():
            if kida_env is None:
                msg = (
                    f"Cannot render {value.name!r}: no template environment. "
                    "Ensure AppConfig.template_dir points at an existing directory."
                )
                raise ConfigurationError(msg)
            from roost.templating.integration import render_template

            return Response(body=render_template(kida_env, value))
        case Fragment():
            if kida_env is None:
                msg = (
                    f"Cannot render {value.template_name!r}: no template environment. "
                    "Ensure AppConfig.template_dir points at an existing directory."
                )
                raise ConfigurationError(msg)
            from roost.templating.integration import render_fragment

            return Response(body=render_fragment(kida_env, value))
        case None:
            return Response(body="")
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response.json(value)
        case (inner, int() as status):
            return negotiate(inner, kida_env=kida_env).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, kida_env=kida_env).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return str, dict, list, bytes, None, Template, Fragment, "
                "Response, or Redirect."
            )
            raise TypeError(msg)
