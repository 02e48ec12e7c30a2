from typing import Any

from pydantic import BaseModel, ConfigDict


class BilingualRecordIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    name_en: str | None = None
    name_km: str | None = None
    description_en: str | None = None
    description_km: str | None = None


class LanguageRequest(BaseModel):
    language: str


class LanguageResponse(BaseModel):
    language: str
    name: str
    direction: str


class LocalizeRequest(BaseModel):
    records: list[dict[str, Any]]
    language: str | None = None


class MergeRequest(BaseModel):
    existing: dict[str, Any]
    updates: dict[str, Any] = {}


class ValidationResponse(BaseModel):
    valid: bool
    missing: list[str]


class TranslationResponse(BaseModel):
    key: str
    language: str
    text: str


class FormatRequest(BaseModel):
    kind: str
    value: Any = None
    language: str | None = None
    format: str = "long"


class FormatResponse(BaseModel):
    kind: str
    language: str
    text: str
