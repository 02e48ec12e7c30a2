"""Core handler functions, free of FastAPI types apart from HTTPException. Used by both REST routes and WebSocket."""

from collections.abc import Callable
from typing import Any

from fastapi import HTTPException

from tec_lms import formatting
from tec_lms.bilingual import (
    get_missing_translations,
    is_valid_bilingual_record,
    merge_bilingual_updates,
    to_localized_view,
)
from tec_lms.i18n import get_dictionary, translate
from tec_lms.language import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    Language,
    coerce_language,
    get_language_display_name,
    parse_language,
)
from tec_lms.preferences import LanguagePreferences


def require_language(value: Any) -> Language:
    language = parse_language(value)
    if language is None:
        raise HTTPException(status_code=400, detail=f"Unsupported language: {value}")
    return language


def _require_mapping(value: Any, name: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise HTTPException(status_code=400, detail=f"{name} must be an object.")
    return value


def _language_info(language: Language) -> dict:
    return {
        "language": language.value,
        "name": get_language_display_name(language),
        "direction": formatting.get_text_direction(language),
    }


async def handle_languages() -> dict:
    return {
        "languages": [
            {"code": lang.value, "name": get_language_display_name(lang)} for lang in SUPPORTED_LANGUAGES
        ],
        "default": DEFAULT_LANGUAGE.value,
    }


async def handle_dictionary(language: str) -> dict:
    lang = parse_language(language)
    if lang is None:
        raise HTTPException(status_code=404, detail=f"Language '{language}' not supported")
    return dict(get_dictionary(lang))


async def handle_translate(key: str, language: Any) -> dict:
    key = (key or "").strip()
    if not key:
        raise HTTPException(status_code=400, detail="key is required.")
    lang = coerce_language(language)
    return {"key": key, "language": lang.value, "text": translate(key, lang)}


async def handle_get_language(prefs: LanguagePreferences) -> dict:
    return _language_info(prefs.resolve_active_language())


async def handle_set_language(prefs: LanguagePreferences, language: Any) -> dict:
    return _language_info(prefs.change_language(require_language(language)))


async def handle_localize(records: Any, language: Any) -> dict:
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise HTTPException(status_code=400, detail="records must be a list of objects.")
    lang = coerce_language(language)
    return {"language": lang.value, "records": to_localized_view(records, lang)}


async def handle_merge(existing: Any, updates: Any) -> dict:
    merged = merge_bilingual_updates(
        _require_mapping(existing, "existing"),
        _require_mapping(updates or {}, "updates"),
    )
    return {
        "record": merged,
        "valid": is_valid_bilingual_record(merged),
        "missing": [lang.value for lang in get_missing_translations(merged)],
    }


async def handle_validate(record: Any) -> dict:
    record = _require_mapping(record, "record")
    return {
        "valid": is_valid_bilingual_record(record),
        "missing": [lang.value for lang in get_missing_translations(record)],
    }


def _format_number(value: Any, lang: Language, _fmt: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise HTTPException(status_code=400, detail="number requires a numeric value.")
    return formatting.format_number(value, lang)


def _format_calendar(getter: Callable[..., str]) -> Callable[[Any, Language, str], str]:
    def fmt(value: Any, lang: Language, fmt_name: str) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise HTTPException(status_code=400, detail="index must be an integer.")
        return getter(value, fmt_name, lang)

    return fmt


def _format_dated(formatter: Callable[[Any, Language], str]) -> Callable[[Any, Language, str], str]:
    def fmt(value: Any, lang: Language, _fmt: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise HTTPException(status_code=400, detail="value must be an ISO date string.")
        return formatter(value, lang)

    return fmt


FORMATTERS: dict[str, Callable[[Any, Language, str], str]] = {
    "date": _format_dated(formatting.format_date),
    "time-ago": _format_dated(formatting.format_time_ago),
    "number": _format_number,
    "month": _format_calendar(formatting.get_month_name),
    "day": _format_calendar(formatting.get_day_name),
}


async def handle_format(kind: str, value: Any, language: Any, format: str = "long") -> dict:
    formatter = FORMATTERS.get(kind)
    if formatter is None:
        raise HTTPException(status_code=400, detail=f"Unsupported format kind: {kind}")
    lang = coerce_language(language)
    return {"kind": kind, "language": lang.value, "text": formatter(value, lang, format)}
