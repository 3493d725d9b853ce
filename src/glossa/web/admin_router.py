"""Admin endpoints for languages, translation keys and translations.

Authorization and auditing happen in :class:`~glossa.admin.LocalizationAdmin`;
handlers only pass the caller's identity through.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request
from pydantic import BaseModel

from glossa.auth.middleware import get_identity

router = APIRouter(prefix="/api/admin")


class LanguageCreate(BaseModel):
    code: str
    name: str
    is_active: bool = True


class LanguageUpdate(BaseModel):
    name: str | None = None
    is_active: bool | None = None


class TranslationKeyCreate(BaseModel):
    key_name: str
    description: str | None = None
    category: str | None = None


class TranslationValue(BaseModel):
    value: str | None = None


# --- Languages ---


@router.get("/languages")
async def list_languages(request: Request) -> list[dict[str, Any]]:
    """All languages, active and inactive."""
    admin = request.app.state.admin
    languages = await admin.list_languages(get_identity(request))
    return [lang.model_dump(mode="json") for lang in languages]


@router.post("/languages", status_code=201)
async def create_language(body: LanguageCreate, request: Request) -> dict[str, Any]:
    admin = request.app.state.admin
    language = await admin.create_language(
        get_identity(request), body.code, body.name, body.is_active
    )
    return language.model_dump(mode="json")


@router.put("/languages/{language_id}")
async def update_language(
    language_id: str, body: LanguageUpdate, request: Request
) -> dict[str, Any]:
    admin = request.app.state.admin
    language = await admin.update_language(
        get_identity(request), language_id, name=body.name, is_active=body.is_active
    )
    return language.model_dump(mode="json")


# --- Translation keys ---


@router.get("/translation-keys")
async def list_translation_keys(request: Request) -> list[dict[str, Any]]:
    admin = request.app.state.admin
    keys = await admin.list_translation_keys(get_identity(request))
    return [key.model_dump(mode="json") for key in keys]


@router.post("/translation-keys", status_code=201)
async def create_translation_key(
    body: TranslationKeyCreate, request: Request
) -> dict[str, Any]:
    admin = request.app.state.admin
    key = await admin.create_translation_key(
        get_identity(request), body.key_name, body.description, body.category
    )
    return key.model_dump(mode="json")


@router.put("/translation-keys/{key_id}")
async def update_translation_key(
    key_id: str,
    request: Request,
    fields: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    """Update description and/or category. Renaming a key is rejected."""
    admin = request.app.state.admin
    key = await admin.update_translation_key(get_identity(request), key_id, fields)
    return key.model_dump(mode="json")


@router.delete("/translation-keys/{key_id}")
async def delete_translation_key(key_id: str, request: Request) -> dict[str, Any]:
    """Delete a key together with all of its translations."""
    admin = request.app.state.admin
    await admin.delete_translation_key(get_identity(request), key_id)
    return {"deleted": True, "id": key_id}


# --- Translations ---


@router.get("/translations")
async def list_translations(request: Request) -> list[dict[str, Any]]:
    """Coverage grid: every key crossed with every active language."""
    admin = request.app.state.admin
    rows = await admin.list_translations(get_identity(request))
    return [row.model_dump(mode="json") for row in rows]


@router.get("/translations/export")
async def export_translations(
    request: Request, include_inactive: bool = False
) -> dict[str, dict[str, str]]:
    admin = request.app.state.admin
    return await admin.export_translations(
        get_identity(request), include_inactive=include_inactive
    )


@router.post("/translations/import")
async def import_translations(
    request: Request,
    data: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    """Apply ``{language: {key: value}}``; failures are itemized, not fatal."""
    admin = request.app.state.admin
    result = await admin.import_translations(get_identity(request), data)
    return {
        "imported": result.imported,
        "errors": result.messages,
    }


@router.put("/translations/{key_id}/{code}")
async def upsert_translation(
    key_id: str, code: str, body: TranslationValue, request: Request
) -> dict[str, Any]:
    admin = request.app.state.admin
    translation = await admin.upsert_translation(
        get_identity(request), key_id, code, body.value
    )
    return translation.model_dump(mode="json")


@router.delete("/translations/{key_id}/{code}")
async def delete_translation(key_id: str, code: str, request: Request) -> dict[str, Any]:
    admin = request.app.state.admin
    await admin.delete_translation(get_identity(request), key_id, code)
    return {"deleted": True}
