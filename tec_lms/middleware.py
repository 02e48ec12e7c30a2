"""Per-request language resolution middleware."""

from collections.abc import Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from tec_lms.config import settings
from tec_lms.preferences import LANGUAGE_KEY, LanguagePreferences

COOKIE_MAX_AGE = 365 * 24 * 60 * 60


class CookiePreferenceStore:
    """Preference store over the request cookies; writes become ``Set-Cookie``."""

    def __init__(self, cookies: Mapping[str, str], cookie_name: str = "language") -> None:
        self._cookies = dict(cookies)
        self._cookie_name = cookie_name
        self._pending: dict[str, str] = {}

    def _name(self, key: str) -> str:
        return self._cookie_name if key == LANGUAGE_KEY else key

    def get(self, key: str) -> str | None:
        name = self._name(key)
        return self._pending.get(name, self._cookies.get(name))

    def set(self, key: str, value: str) -> None:
        self._pending[self._name(key)] = value

    def apply(self, response: Response) -> None:
        for name, value in self._pending.items():
            response.set_cookie(name, value, max_age=COOKIE_MAX_AGE, samesite="lax")


class LanguageMiddleware(BaseHTTPMiddleware):
    """Resolve the active language and expose it on ``request.state``.

    The language cookie is the persistent store and ``Accept-Language`` is
    the ambient locale.  ``request.state.preferences`` lets endpoints change
    the language; the cookie is written on the way out and the resolved
    language is echoed back via the ``Content-Language`` response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        store = CookiePreferenceStore(request.cookies, settings.language_cookie)
        prefs = LanguagePreferences(store, ambient_locale=lambda: request.headers.get("Accept-Language"))
        request.state.preferences = prefs
        request.state.language = prefs.resolve_active_language().value

        response = await call_next(request)
        store.apply(response)
        response.headers["Content-Language"] = prefs.resolve_active_language().value
        return response
