"""Language selection gate.

Picks the request language from, in order, the ``lang`` query
parameter, the session, the browser's ``Accept-Language`` header and
finally the default. Unsupported values fall back to the default. The
choice is stored in the session and in ``g.language``; the gate never
rejects.
"""

from collections.abc import Sequence

from roost.context import g
from roost.http.request import Request
from roost.middleware.sessions import get_session

SUPPORTED_LANGUAGES: tuple[str, ...] = ("uz", "ru", "en")
DEFAULT_LANGUAGE = "uz"
SESSION_KEY = "app_language"


def browser_language(header: str | None) -> str | None:
    """Two-letter code of the first ``Accept-Language`` entry."""
    if not header:
        return None
    first = header.split(",", 1)[0].split(";", 1)[0].strip()
    return first[:2].lower() or None


def current_language() -> str:
    """The language chosen for this request, or the default."""
    return g.get("language", DEFAULT_LANGUAGE)


class LanguageMiddleware:
    __slots__ = ("default", "supported")

    def __init__(
        self,
        supported: Sequence[str] = SUPPORTED_LANGUAGES,
        default: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.supported = tuple(supported)
        self.default = default

    def handle(self, request: Request) -> bool:
        session = get_session()
        language = (
            request.query.get("lang")
            or session.get(SESSION_KEY)
            or browser_language(request.headers.get("accept-language"))
            or self.default
        )
        if language not in self.supported:
            language = self.default
        session[SESSION_KEY] = language
        g.language = language
        return True
