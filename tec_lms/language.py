"""The two supported UI languages and conversions from boundary input."""

from enum import Enum
from typing import Any


class Language(str, Enum):
    EN = "en"
    KM = "km"


# Khmer first: every unresolved preference lands here.
DEFAULT_LANGUAGE = Language.KM

SUPPORTED_LANGUAGES: tuple[Language, ...] = (Language.EN, Language.KM)

LOCALE_TAGS: dict[Language, str] = {
    Language.EN: "en-US",
    Language.KM: "km-KH",
}

LANGUAGE_NAMES: dict[Language, str] = {
    Language.EN: "English",
    Language.KM: "ខ្មែរ",
}


def parse_language(value: Any) -> Language | None:
    """Return the ``Language`` for an exact code (``"en"``/``"km"``), else ``None``."""
    if isinstance(value, Language):
        return value
    if isinstance(value, str):
        try:
            return Language(value)
        except ValueError:
            return None
    return None


def coerce_language(value: Any) -> Language:
    """Like :func:`parse_language`, but invalid input degrades to Khmer."""
    return parse_language(value) or DEFAULT_LANGUAGE


def primary_subtag(tag: str | None) -> str:
    """Primary subtag of a locale tag or of the first ``Accept-Language`` entry.

    ``"km-KH"`` -> ``"km"``, ``"en-US,en;q=0.9"`` -> ``"en"``.
    """
    if not tag:
        return ""
    first = tag.split(",")[0].split(";")[0].strip()
    return first.replace("_", "-").split("-")[0].lower()


def get_language_display_name(language: Language | str) -> str:
    return LANGUAGE_NAMES[coerce_language(language)]
