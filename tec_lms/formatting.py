"""Locale-aware formatting: dates, relative time, numerals and calendar names.

Every function takes an optional ``language``; when omitted the active
preference is resolved, which server-side means Khmer.
"""

import logging
import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from tec_lms.i18n import get_dictionary, lookup_node, translate
from tec_lms.language import Language, coerce_language
from tec_lms.preferences import resolve_active_language

logger = logging.getLogger("tec_lms.formatting")

KHMER_DIGITS = "០១២៣៤៥៦៧៨៩"
_TO_KHMER = str.maketrans("0123456789", KHMER_DIGITS)

_CALENDAR_KEYS: dict[tuple[str, str], str] = {
    ("month", "long"): "date.monthsLong",
    ("month", "short"): "date.monthsShort",
    ("day", "long"): "date.daysLong",
    ("day", "short"): "date.daysShort",
}


def _language(language: Language | str | None) -> Language:
    return resolve_active_language() if language is None else coerce_language(language)


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
    logger.warning("Cannot interpret %r as a date", value)
    return None


def format_date(value: datetime | date | str, language: Language | str | None = None) -> str:
    """Long-form date: ``November 4, 2024`` / ``4 វិច្ឆិកា 2024``.

    A value that cannot be read as a date is returned as text, unchanged.
    """
    lang = _language(language)
    dt = _to_datetime(value)
    if dt is None:
        return str(value)
    month = get_month_name(dt.month - 1, "long", lang)
    if lang is Language.EN:
        return f"{month} {dt.day}, {dt.year}"
    return f"{dt.day} {month} {dt.year}"


def format_time_ago(
    value: datetime | date | str,
    language: Language | str | None = None,
    now: datetime | None = None,
) -> str:
    """Relative time bucketed into just-now / minutes / hours / days.

    Naive datetimes are read as UTC when compared against aware ones.
    Anything a week or older falls through to :func:`format_date`.
    """
    lang = _language(language)
    dt = _to_datetime(value)
    if dt is None:
        return str(value)

    if now is None:
        now = datetime.now(timezone.utc) if dt.tzinfo else datetime.now()
    if (dt.tzinfo is None) != (now.tzinfo is None):
        dt = dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
        now = now if now.tzinfo else now.replace(tzinfo=timezone.utc)

    seconds = (now - dt).total_seconds()
    minutes = math.floor(seconds / 60)
    hours = math.floor(seconds / 3600)
    days = math.floor(seconds / 86400)

    if minutes < 1:
        return translate("time.justNow", lang)
    if minutes < 60:
        return f"{minutes}{translate('time.minutesAgo', lang)}"
    if hours < 24:
        return f"{hours}{translate('time.hoursAgo', lang)}"
    if days < 7:
        return f"{days}{translate('time.daysAgo', lang)}"
    return format_date(dt, lang)


def _number_text(num: Any) -> str:
    if isinstance(num, float):
        if math.isnan(num):
            return "NaN"
        if math.isinf(num):
            return "Infinity" if num > 0 else "-Infinity"
        if num.is_integer() and abs(num) < 1e21:
            return str(int(num))
        text = repr(num)
        if "e" in text:
            # Exponent form only below 1e-6 or from 1e21 up, written as 1e-7 / 1e+21.
            mantissa, exponent = text.split("e")
            exp = int(exponent)
            if -7 < exp < 21:
                return format(Decimal(text), "f")
            return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"
    return str(num)


def format_number(num: int | float, language: Language | str | None = None) -> str:
    text = _number_text(num)
    if _language(language) is Language.KM:
        return text.translate(_TO_KHMER)
    return text


def _calendar_names(kind: str, format: str, language: Language) -> list[str]:
    key = _CALENDAR_KEYS[(kind, "long" if format == "long" else "short")]
    node = lookup_node(get_dictionary(language), key)
    if isinstance(node, str):
        return node.split(",")
    if isinstance(node, list):
        return [str(name) for name in node]
    return []


def _pick(names: list[str], index: Any) -> str:
    if isinstance(index, bool) or not isinstance(index, int):
        return ""
    return names[index] if 0 <= index < len(names) else ""


def get_month_name(index: int, format: str = "long", language: Language | str | None = None) -> str:
    return _pick(_calendar_names("month", format, _language(language)), index)


def get_day_name(index: int, format: str = "long", language: Language | str | None = None) -> str:
    """Day name with 0 = Sunday."""
    return _pick(_calendar_names("day", format, _language(language)), index)


def is_rtl(language: Any = None) -> bool:
    # Khmer and English are both left-to-right.
    return False


def get_text_direction(language: Any = None) -> str:
    return "ltr"
