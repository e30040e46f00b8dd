"""Signed cookie sessions.

The session is a JSON-serializable dict, signed with ``itsdangerous``
and stored in a cookie. ``SessionMiddleware`` is pipeline middleware:
add it with ``app.add_middleware()`` so that gates and controllers can
read the session through ``get_session()``.

Flash messages live under the ``_flash`` key and are removed when read.
"""

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from itsdangerous import BadData, URLSafeTimedSerializer

from roost.errors import ConfigurationError
from roost.http.request import Request
from roost.http.response import Response
from roost.middleware.protocol import Next

FLASH_KEY = "_flash"

_session_var: ContextVar[dict[str, Any] | None] = ContextVar("roost_session", default=None)


def get_session() -> dict[str, Any]:
    """Return the current session dict.

    Raises ``LookupError`` outside a request served through
    ``SessionMiddleware``.
    """
    session = _session_var.get()
    if session is None:
        msg = (
            "No active session. Add SessionMiddleware to the app "
            "before accessing the session."
        )
        raise LookupError(msg)
    return session


def regenerate_session() -> dict[str, Any]:
    """Discard all session data and return the (now empty) session.

    Call on login and logout. The middleware signs the empty dict on
    the way out, so the client gets a fresh cookie value.
    """
    session = get_session()
    session.clear()
    return session


def flash(kind: str, message: str) -> None:
    """Store a one-shot message for the next request."""
    get_session().setdefault(FLASH_KEY, {})[kind] = message


def get_flash(kind: str) -> str | None:
    """Pop the flash message of *kind*, if any."""
    session = get_session()
    messages = session.get(FLASH_KEY)
    if not messages:
        return None
    message = messages.pop(kind, None)
    if not messages:
        del session[FLASH_KEY]
    return message


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session cookie settings. ``secret_key`` is required."""

    secret_key: str
    cookie_name: str = "roost_session"
    max_age: int = 86400
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"


class SessionMiddleware:
    """Load the session cookie before the request, save it after.

    Usage::

        from roost.middleware.sessions import SessionConfig, SessionMiddleware

        app.add_middleware(SessionMiddleware(SessionConfig(secret_key=key)))

    A missing, tampered or expired cookie yields an empty session.
    """

    __slots__ = ("_config", "_serializer")

    def __init__(self, config: SessionConfig) -> None:
        if not config.secret_key:
            msg = "SessionConfig.secret_key must not be empty."
            raise ConfigurationError(msg)
        self._config = config
        self._serializer = URLSafeTimedSerializer(config.secret_key)

    def load(self, request: Request) -> dict[str, Any]:
        """Deserialize and verify the session cookie."""
        raw = request.cookies.get(self._config.cookie_name)
        if not raw:
            return {}
        try:
            data = self._serializer.loads(raw, max_age=self._config.max_age)
        except BadData:
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def dump(self, session: dict[str, Any]) -> str:
        """Serialize and sign *session* for the cookie value."""
        return self._serializer.dumps(session)

    def _save(self, response: Response, session: dict[str, Any]) -> Response:
        cfg = self._config
        return response.with_cookie(
            name=cfg.cookie_name,
            value=self.dump(session),
            max_age=cfg.max_age,
            path=cfg.path,
            domain=cfg.domain,
            secure=cfg.secure,
            httponly=cfg.httponly,
            samesite=cfg.samesite,
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        session = self.load(request)
        token = _session_var.set(session)
        try:
            response = await next(request)
        finally:
            _session_var.reset(token)
        # Always re-sign so the timestamp slides with activity
        return self._save(response, session)
