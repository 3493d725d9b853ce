"""AI translation draft endpoints. Drafts persist only through ``/accept``."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from glossa.auth.middleware import get_identity

router = APIRouter(prefix="/api/ai-translations")


class GenerateRequest(BaseModel):
    key: str
    target_language: str
    source_language: str = "en"
    source_text: str | None = None
    context: str | None = None


class BulkGenerateRequest(BaseModel):
    key: str
    target_languages: list[str]
    source_language: str = "en"
    source_text: str | None = None
    context: str | None = None


class AcceptRequest(BaseModel):
    key: str
    language_code: str
    translation: str


@router.post("/generate")
async def generate(body: GenerateRequest, request: Request) -> dict[str, Any]:
    admin = request.app.state.admin
    translation = await admin.generate(
        get_identity(request),
        body.key,
        body.target_language,
        source_language=body.source_language,
        source_text=body.source_text,
        context=body.context,
    )
    return {
        "key": body.key,
        "source_language": body.source_language,
        "target_language": body.target_language,
        "translation": translation,
    }


@router.post("/generate-bulk")
async def generate_bulk(body: BulkGenerateRequest, request: Request) -> dict[str, Any]:
    """Draft into several languages; per-language failures land in ``errors``."""
    admin = request.app.state.admin
    result = await admin.generate_bulk(
        get_identity(request),
        body.key,
        body.target_languages,
        source_language=body.source_language,
        source_text=body.source_text,
        context=body.context,
    )
    return result.model_dump(mode="json")


@router.post("/accept")
async def accept(body: AcceptRequest, request: Request) -> dict[str, Any]:
    admin = request.app.state.admin
    translation = await admin.accept_generated(
        get_identity(request), body.key, body.language_code, body.translation
    )
    return translation.model_dump(mode="json")


@router.get("/languages")
async def list_ai_languages(request: Request) -> list[dict[str, Any]]:
    admin = request.app.state.admin
    return [lang.model_dump() for lang in admin.ai_languages(get_identity(request))]


@router.get("/status")
async def ai_status(request: Request) -> dict[str, Any]:
    """Provider reachability and probe latency."""
    admin = request.app.state.admin
    health = await admin.ai_health(get_identity(request))
    return health.model_dump(mode="json")
