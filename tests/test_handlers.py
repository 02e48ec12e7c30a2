import pytest
from fastapi import HTTPException

from tec_lms.handlers import (
    handle_dictionary,
    handle_format,
    handle_get_language,
    handle_languages,
    handle_localize,
    handle_merge,
    handle_set_language,
    handle_translate,
    handle_validate,
)
from tec_lms.language import Language
from tec_lms.preferences import LanguagePreferences, MemoryPreferenceStore


@pytest.fixture
def prefs():
    return LanguagePreferences(MemoryPreferenceStore())


class TestLanguageHandlers:
    @pytest.mark.asyncio
    async def test_languages(self):
        result = await handle_languages()
        assert result["default"] == "km"
        assert result["languages"] == [
            {"code": "en", "name": "English"},
            {"code": "km", "name": "ខ្មែរ"},
        ]

    @pytest.mark.asyncio
    async def test_get_language_default(self, prefs):
        assert await handle_get_language(prefs) == {"language": "km", "name": "ខ្មែរ", "direction": "ltr"}

    @pytest.mark.asyncio
    async def test_set_language_notifies(self, prefs):
        seen = []
        prefs.subscribe(seen.append)
        result = await handle_set_language(prefs, "en")
        assert result["language"] == "en"
        assert seen == [Language.EN]
        assert prefs.resolve_active_language() is Language.EN

    @pytest.mark.asyncio
    async def test_set_language_rejects_invalid(self, prefs):
        with pytest.raises(HTTPException) as exc_info:
            await handle_set_language(prefs, "fr")
        assert exc_info.value.status_code == 400
        assert prefs.resolve_active_language() is Language.KM


class TestDictionaryHandlers:
    @pytest.mark.asyncio
    async def test_dictionary(self):
        result = await handle_dictionary("en")
        assert result["nav"]["home"] == "Home"

    @pytest.mark.asyncio
    async def test_dictionary_unknown_language(self):
        with pytest.raises(HTTPException) as exc_info:
            await handle_dictionary("fr")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_translate(self):
        result = await handle_translate("dashboard.title", "en")
        assert result == {"key": "dashboard.title", "language": "en", "text": "Dashboard"}

    @pytest.mark.asyncio
    async def test_translate_invalid_language_degrades(self):
        result = await handle_translate("dashboard.title", "xx")
        assert result["language"] == "km"
        assert result["text"] == "ផ្ទាំងគ្រប់គ្រង"

    @pytest.mark.asyncio
    async def test_translate_requires_key(self):
        with pytest.raises(HTTPException):
            await handle_translate("  ", "en")


class TestRecordHandlers:
    @pytest.mark.asyncio
    async def test_localize(self, course):
        result = await handle_localize([course], "en")
        assert result["language"] == "en"
        assert result["records"][0]["name"] == "Mathematics"
        assert "name_km" not in result["records"][0]

    @pytest.mark.asyncio
    async def test_localize_rejects_non_list(self):
        with pytest.raises(HTTPException):
            await handle_localize({"name_en": "x"}, "en")

    @pytest.mark.asyncio
    async def test_merge(self, course):
        result = await handle_merge(course, {"name_en": "Algebra", "name_km": ""})
        assert result["record"]["name_en"] == "Algebra"
        assert result["record"]["name_km"] == "គណិតវិទ្យា"
        assert result["valid"] is True
        assert result["missing"] == []

    @pytest.mark.asyncio
    async def test_merge_without_updates(self, course):
        result = await handle_merge(course, None)
        assert result["record"] == course

    @pytest.mark.asyncio
    async def test_merge_rejects_non_object(self):
        with pytest.raises(HTTPException):
            await handle_merge("nope", {})

    @pytest.mark.asyncio
    async def test_validate(self):
        assert await handle_validate({"name_en": "X"}) == {"valid": True, "missing": ["km"]}
        assert await handle_validate({}) == {"valid": False, "missing": ["en", "km"]}


class TestFormatHandler:
    @pytest.mark.asyncio
    async def test_number(self):
        result = await handle_format("number", 123, "km")
        assert result == {"kind": "number", "language": "km", "text": "១២៣"}

    @pytest.mark.asyncio
    async def test_date(self):
        result = await handle_format("date", "2024-11-04", "en")
        assert result["text"] == "November 4, 2024"

    @pytest.mark.asyncio
    async def test_month_short(self):
        result = await handle_format("month", 0, "en", format="short")
        assert result["text"] == "Jan"

    @pytest.mark.asyncio
    async def test_day(self):
        result = await handle_format("day", 0, "km")
        assert result["text"] == "ថ្ងៃអាទិត្យ"

    @pytest.mark.asyncio
    async def test_unknown_kind(self):
        with pytest.raises(HTTPException) as exc_info:
            await handle_format("currency", 1, "en")
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind, value", [
        ("number", "12"),
        ("number", True),
        ("month", "1"),
        ("date", 20241104),
        ("time-ago", ""),
    ])
    async def test_invalid_values(self, kind, value):
        with pytest.raises(HTTPException):
            await handle_format(kind, value, "en")
