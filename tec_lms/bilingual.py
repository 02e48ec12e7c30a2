"""Bilingual record helpers.

Records carry paired ``{field}_en`` / ``{field}_km`` values.  These helpers
pick a language with a Khmer-biased fallback, collapse records to a single
language for transport, and merge and validate edits.  All of them accept any
mapping, treat a missing key, ``None`` and ``""`` alike, never raise on
missing data, and never mutate their inputs.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from tec_lms.language import Language, coerce_language

BILINGUAL_FIELDS: tuple[str, ...] = ("name_en", "name_km", "description_en", "description_km")

Record = Mapping[str, Any]


def _text(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


def resolve_localized_field(
    record: Record,
    field: str,
    language: Language | str = Language.KM,
    fallback_field: str | None = None,
) -> str:
    """Pick ``{field}_{language}``, else Khmer, else English, else the plain field."""
    lang = coerce_language(language)
    en = record.get(f"{field}_en")
    km = record.get(f"{field}_km")
    if lang is Language.EN and en:
        return _text(en)
    if lang is Language.KM and km:
        return _text(km)
    if km:
        return _text(km)
    if en:
        return _text(en)
    return _text(record.get(fallback_field or field))


def get_localized_name(record: Record, language: Language | str = Language.KM, fallback_field: str = "name") -> str:
    return resolve_localized_field(record, "name", language, fallback_field)


def get_localized_description(record: Record, language: Language | str = Language.KM) -> str:
    return resolve_localized_field(record, "description", language)


def localize_record(record: Record, language: Language | str = Language.KM) -> dict[str, Any]:
    """Copy of ``record`` with ``name``/``description`` filled in; bilingual keys kept."""
    return {
        **record,
        "name": get_localized_name(record, language),
        "description": get_localized_description(record, language),
    }


def to_localized_view(records: Iterable[Record], language: Language | str = Language.KM) -> list[dict[str, Any]]:
    """Collapse each record to one language and drop the four bilingual keys."""
    views = []
    for record in records:
        view = {key: value for key, value in record.items() if key not in BILINGUAL_FIELDS}
        view["name"] = get_localized_name(record, language)
        view["description"] = get_localized_description(record, language)
        views.append(view)
    return views


def build_localized_name_sql(language: Language | str = Language.KM, table_alias: str = "") -> str:
    """SQL ``CASE`` expression selecting the localized name column as ``name``."""
    prefix = f"{table_alias}." if table_alias else ""
    if coerce_language(language) is Language.EN:
        preferred, other = "name_en", "name_km"
    else:
        preferred, other = "name_km", "name_en"
    return (
        f"CASE WHEN {prefix}{preferred} IS NOT NULL THEN {prefix}{preferred} "
        f"ELSE {prefix}{other} END as name"
    )


def extract_bilingual_from_form(form: Record) -> dict[str, Any]:
    """Bilingual fields from a submission; a plain ``name``/``description`` fills both sides."""
    return {
        "name_en": form.get("name_en") or form.get("name"),
        "name_km": form.get("name_km") or form.get("name"),
        "description_en": form.get("description_en") or form.get("description"),
        "description_km": form.get("description_km") or form.get("description"),
    }


def is_valid_bilingual_record(record: Record) -> bool:
    # Name needs at least one language; description may be empty on both sides.
    return bool(record.get("name_en") or record.get("name_km"))


def get_missing_translations(record: Record) -> list[Language]:
    missing: list[Language] = []
    if not record.get("name_en"):
        missing.append(Language.EN)
    if not record.get("name_km"):
        missing.append(Language.KM)
    return missing


def merge_bilingual_updates(existing: Record, updates: Record) -> dict[str, Any]:
    """Non-empty update values win; every other tracked value is kept as is."""
    merged = dict(existing)
    for field in BILINGUAL_FIELDS:
        if updates.get(field):
            merged[field] = updates[field]
    return merged


@dataclass(frozen=True)
class BilingualField:
    en: str = ""
    km: str = ""

    def get(self, language: Language | str = Language.KM) -> str:
        return resolve_localized_field({"value_en": self.en, "value_km": self.km}, "value", language)

    def as_record(self, field: str) -> dict[str, str]:
        return {f"{field}_en": self.en, f"{field}_km": self.km}


def create_bilingual_field(en: str, km: str) -> BilingualField:
    return BilingualField(en=en, km=km)
