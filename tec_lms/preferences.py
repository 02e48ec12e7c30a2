"""Active-language resolution over an injected key-value store.

The store is whatever the host can offer: a cookie jar, a per-session dict,
or nothing at all (``NullPreferenceStore``), in which case resolution falls
through to the ambient locale and then to Khmer.

Fallback chain:  stored code → ambient locale (Khmer only) → ``km``.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from tec_lms.language import DEFAULT_LANGUAGE, Language, coerce_language, parse_language, primary_subtag

logger = logging.getLogger("tec_lms.preferences")

LANGUAGE_KEY = "language"

LanguageListener = Callable[[Language], Any]


class PreferenceStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryPreferenceStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class NullPreferenceStore:
    """Stands in where no client storage is reachable."""

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        pass


class LanguagePreferences:
    """Reads and writes the language preference and notifies listeners on change.

    Nothing is cached: every ``resolve_active_language()`` call reads the
    store again.  Concurrent writers are last-write-wins.
    """

    def __init__(
        self,
        store: PreferenceStore | None = None,
        ambient_locale: Callable[[], str | None] | None = None,
    ) -> None:
        self.store: PreferenceStore = store if store is not None else NullPreferenceStore()
        self._ambient_locale = ambient_locale
        self._listeners: list[LanguageListener] = []

    def _stored(self) -> Language | None:
        try:
            return parse_language(self.store.get(LANGUAGE_KEY))
        except Exception:
            logger.exception("Preference store read failed; treating as unset")
            return None

    def _ambient(self) -> str | None:
        if self._ambient_locale is None:
            return None
        try:
            return self._ambient_locale()
        except Exception:
            logger.exception("Ambient locale lookup failed")
            return None

    def resolve_active_language(self) -> Language:
        stored = self._stored()
        if stored is not None:
            return stored
        # Only an explicitly Khmer locale is detected; there is no English path.
        if primary_subtag(self._ambient()) == Language.KM.value:
            return Language.KM
        return DEFAULT_LANGUAGE

    def persist_language(self, language: Language | str) -> None:
        code = coerce_language(language).value
        try:
            self.store.set(LANGUAGE_KEY, code)
        except Exception:
            logger.exception("Preference store write failed for %r", code)

    def change_language(self, language: Language | str) -> Language:
        new_language = coerce_language(language)
        self.persist_language(new_language)
        for listener in list(self._listeners):
            try:
                listener(new_language)
            except Exception:
                logger.exception("Language change listener %r failed", listener)
        return new_language

    def subscribe(self, listener: LanguageListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


# Module-level singleton for server-side callers: no store, so Khmer.
preferences = LanguagePreferences()


def resolve_active_language() -> Language:
    return preferences.resolve_active_language()


def persist_language(language: Language | str) -> None:
    preferences.persist_language(language)
