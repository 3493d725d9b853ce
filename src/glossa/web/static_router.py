"""Static locale bundle endpoints: public reads, admin writes and backups."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Body, Request
from pydantic import BaseModel

from glossa.auth.middleware import get_identity

router = APIRouter(prefix="/api/static-translations")


class RestoreRequest(BaseModel):
    backup_name: str


@router.get("")
async def list_static_languages(request: Request) -> dict[str, Any]:
    """Language codes that have a static bundle."""
    store = request.app.state.bundle_store
    return {"languages": await asyncio.to_thread(store.list_languages)}


@router.get("/{code}")
async def get_static(code: str, request: Request) -> dict[str, Any]:
    store = request.app.state.bundle_store
    translations = await asyncio.to_thread(store.read, code)
    return {"language_code": code, "translations": translations}


@router.put("/{code}")
async def put_static(
    code: str,
    request: Request,
    document: Any = Body(...),
) -> dict[str, Any]:
    """Replace a bundle; the previous version is kept as a backup."""
    admin = request.app.state.admin
    result = await admin.put_static(get_identity(request), code, document)
    return result.model_dump(mode="json")


@router.get("/{code}/backups")
async def list_backups(code: str, request: Request) -> list[dict[str, Any]]:
    admin = request.app.state.admin
    backups = await admin.list_static_backups(get_identity(request), code)
    return [b.model_dump(mode="json") for b in backups]


@router.post("/{code}/restore")
async def restore_backup(code: str, body: RestoreRequest, request: Request) -> dict[str, Any]:
    admin = request.app.state.admin
    result = await admin.restore_static(get_identity(request), code, body.backup_name)
    return result.model_dump(mode="json")
