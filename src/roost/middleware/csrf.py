"""CSRF gate: session-backed token checked on state-changing requests.

The token is a random string stored in the session under
``csrf_token``; ``csrf_token()`` creates it on first use. Forms send it
back in the ``_csrf`` field, scripts in the ``X-CSRF-Token`` header.

Templates::

    <form method="post">
        {{ csrf_field() }}
    </form>

    <meta name="csrf-token" content="{{ csrf_token() }}">
"""

import secrets

from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.sessions import get_session

SESSION_KEY = "csrf_token"
FIELD_NAME = "_csrf"
HEADER_NAME = "X-CSRF-Token"

_SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS"})


def csrf_token() -> str:
    """Return the session's CSRF token, creating one if needed."""
    session = get_session()
    token = session.get(SESSION_KEY)
    if not token:
        token = secrets.token_hex(32)
        session[SESSION_KEY] = token
    return token


def csrf_field() -> str:
    """Hidden ``<input>`` carrying the token, for use as a template global."""
    from kida.utils.html import Markup

    return Markup(f'<input type="hidden" name="{FIELD_NAME}" value="{csrf_token()}">')


class CsrfMiddleware:
    """Reject unsafe requests whose token does not match the session's.

    Rejections answer 419 with a JSON body.
    """

    async def handle(self, request: Request) -> bool:
        if request.method in _SAFE_METHODS:
            return True

        token = request.headers.get(HEADER_NAME.lower(), "")
        if not token and _is_form(request):
            form = await request.form()
            token = form.get(FIELD_NAME) or ""

        expected = get_session().get(SESSION_KEY)
        if not token or not expected:
            return False
        return secrets.compare_digest(str(expected), str(token))

    def on_failure(self, request: Request) -> Response:
        return Response.json(
            {
                "error": "CSRF token not valid",
                "message": "Please refresh the page and try again.",
            },
            status=419,
        )


def _is_form(request: Request) -> bool:
    content_type = request.content_type or ""
    return content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    )
