"""Public translation endpoints consumed by clients and the resolution engine."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from glossa.resolution.engine import ResolutionEngine
from glossa.resolution.sources import RepositorySource

router = APIRouter(prefix="/api/translations")


class ResolveRequest(BaseModel):
    """Keys to resolve server-side, with optional per-key fallbacks."""

    language: str
    keys: list[str]
    fallbacks: dict[str, str] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)


@router.get("/languages")
async def list_languages(request: Request, active_only: bool = True) -> list[dict[str, Any]]:
    """List languages; only active ones unless ``active_only=false``."""
    repository = request.app.state.repository
    languages = await repository.list_languages(active_only=active_only)
    return [lang.model_dump(mode="json") for lang in languages]


@router.get("/{code}")
async def get_translations(code: str, request: Request) -> dict[str, Any]:
    """Dynamic translations for one language as a flat key/value map."""
    repository = request.app.state.repository
    translations = await repository.get_translations_for_language(code)
    return {"language_code": code, "translations": translations}


@router.post("/resolve")
async def resolve(body: ResolveRequest, request: Request) -> dict[str, Any]:
    """Resolve keys through the full fallback chain for one language."""
    source = RepositorySource(request.app.state.repository, request.app.state.bundle_store)
    engine = ResolutionEngine(
        source, default_language=request.app.state.settings.bundles.default_language
    )
    await engine.switch_language(body.language)
    return {
        "language": body.language,
        "translations": {
            key: engine.resolve(key, body.fallbacks.get(key), **body.params)
            for key in body.keys
        },
    }
