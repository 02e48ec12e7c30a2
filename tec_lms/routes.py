from fastapi import APIRouter, HTTPException, Query, Request

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
from tec_lms.language import parse_language
from tec_lms.preferences import LanguagePreferences
from tec_lms.schemas import (
    BilingualRecordIn,
    FormatRequest,
    FormatResponse,
    LanguageRequest,
    LanguageResponse,
    LocalizeRequest,
    MergeRequest,
    TranslationResponse,
    ValidationResponse,
)
from tec_lms.session import registry

router = APIRouter()


def _preferences(request: Request) -> LanguagePreferences:
    prefs = getattr(request.state, "preferences", None)
    return prefs if prefs is not None else LanguagePreferences()


def _language(request: Request, explicit: str | None = None) -> str:
    return explicit or getattr(request.state, "language", None) or _preferences(request).resolve_active_language().value


@router.get("/api/languages")
async def get_languages() -> dict:
    return await handle_languages()


@router.get("/api/i18n/{lang}")
async def get_dictionary(lang: str) -> dict:
    return await handle_dictionary(lang)


@router.get("/api/translate", response_model=TranslationResponse)
async def translate_key(request: Request, key: str = Query(...), language: str | None = None) -> TranslationResponse:
    result = await handle_translate(key, _language(request, language))
    return TranslationResponse(**result)


@router.get("/api/language", response_model=LanguageResponse)
async def get_language(request: Request) -> LanguageResponse:
    return LanguageResponse(**await handle_get_language(_preferences(request)))


@router.post("/api/language", response_model=LanguageResponse)
async def set_language(request: Request, payload: LanguageRequest) -> LanguageResponse:
    return LanguageResponse(**await handle_set_language(_preferences(request), payload.language))


@router.post("/api/localize")
async def localize_records(request: Request, payload: LocalizeRequest) -> dict:
    return await handle_localize(payload.records, _language(request, payload.language))


@router.post("/api/bilingual/merge")
async def merge_records(payload: MergeRequest) -> dict:
    return await handle_merge(payload.existing, payload.updates)


@router.post("/api/bilingual/validate", response_model=ValidationResponse)
async def validate_record(payload: BilingualRecordIn) -> ValidationResponse:
    return ValidationResponse(**await handle_validate(payload.model_dump()))


@router.post("/api/format", response_model=FormatResponse)
async def format_value(request: Request, payload: FormatRequest) -> FormatResponse:
    result = await handle_format(payload.kind, payload.value, _language(request, payload.language), payload.format)
    return FormatResponse(**result)


@router.post("/api/session")
async def create_session(request: Request, payload: LanguageRequest | None = None) -> dict:
    language = payload.language if payload else _language(request)
    if parse_language(language) is None:
        raise HTTPException(status_code=400, detail=f"Unsupported language: {language}")
    session = await registry.create_session(language=language)
    return {"token": session.token, "language": session.preferences.resolve_active_language().value}
