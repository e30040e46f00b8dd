"""Session-based login gates.

``AuthMiddleware`` lets through requests with a live login in the
session; ``GuestMiddleware`` is its inverse, for login and sign-up
pages. Both read the keys that ``login()`` writes.
"""

from time import time
from typing import Any

from roost.http.request import Request
from roost.middleware.sessions import flash, get_session, regenerate_session

# Logins older than this are treated as logged out
SESSION_LIFETIME = 8 * 60 * 60


def login(user_id: Any, username: str) -> None:
    """Record a login in a freshly regenerated session."""
    session = regenerate_session()
    session["logged_in"] = True
    session["user_id"] = user_id
    session["username"] = username
    session["login_time"] = int(time())


def logout() -> None:
    """Forget the login and everything else in the session."""
    regenerate_session()


def is_logged_in(session: dict[str, Any], *, lifetime: int = SESSION_LIFETIME) -> bool:
    if not session.get("logged_in"):
        return False
    if "user_id" not in session or "username" not in session:
        return False
    login_time = session.get("login_time")
    return login_time is None or time() - login_time <= lifetime


class AuthMiddleware:
    """Require a logged-in user; otherwise redirect to ``/``."""

    login_url = "/"
    lifetime = SESSION_LIFETIME

    def handle(self, request: Request) -> bool:
        return is_logged_in(get_session(), lifetime=self.lifetime)

    def redirect_to(self, request: Request) -> str:
        return self.login_url


class GuestMiddleware:
    """Require that nobody is logged in; otherwise go to the dashboard."""

    home_url = "/user/dashboard"
    message = "You are already logged in."

    def handle(self, request: Request) -> bool:
        return not get_session().get("logged_in")

    def on_failure(self, request: Request) -> None:
        # No response of its own; the redirect below is used
        flash("info", self.message)

    def redirect_to(self, request: Request) -> str:
        return self.home_url
