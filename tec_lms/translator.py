"""Language-bound translator for server-rendered views.

Usage::

    from tec_lms.translator import Translator

    t = Translator('en')
    t('dashboard.student.title')                 # "Student Dashboard"
    t('language.changed', name='English')        # "Language changed to English"
    t('missing.key', 'Fallback text')            # "Fallback text"
    t.format_number(2024)                        # "2024"
"""

import datetime as dt

from tec_lms import formatting
from tec_lms.i18n import Dictionaries, get_dictionary, lookup
from tec_lms.language import Language, coerce_language, get_language_display_name
from tec_lms.preferences import resolve_active_language

DateLike = dt.datetime | dt.date | str


class Translator:
    """Key → string translator with ``.format()`` interpolation."""

    def __init__(
        self,
        language: Language | str | None = None,
        dictionaries: Dictionaries | None = None,
    ) -> None:
        self.language = resolve_active_language() if language is None else coerce_language(language)
        self._tree = get_dictionary(self.language, dictionaries)

    def __call__(self, key: str, fallback: str | None = None, **kwargs: object) -> str:
        template = lookup(self._tree, key, fallback or key)
        if not kwargs:
            return template
        try:
            return template.format(**kwargs)
        except (KeyError, IndexError, ValueError):
            return template

    @property
    def direction(self) -> str:
        return formatting.get_text_direction(self.language)

    def format_date(self, value: DateLike) -> str:
        return formatting.format_date(value, self.language)

    def format_number(self, num: int | float) -> str:
        return formatting.format_number(num, self.language)

    def format_time_ago(self, value: DateLike, now: dt.datetime | None = None) -> str:
        return formatting.format_time_ago(value, self.language, now=now)

    def language_name(self, language: Language | str | None = None) -> str:
        return get_language_display_name(language or self.language)
