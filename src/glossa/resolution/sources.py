"""Where the resolution engine loads its layers from."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from glossa.core.errors import NotFoundError

if TYPE_CHECKING:
    from glossa.bundles.store import StaticBundleStore
    from glossa.repositories.protocols import TranslationRepository


@runtime_checkable
class TranslationSource(Protocol):
    """Loads the dynamic and static documents for a language."""

    async def fetch_dynamic(self, language: str) -> dict[str, str]: ...

    async def fetch_static(self, language: str) -> dict[str, str]: ...


class RepositorySource:
    """In-process source reading the repository and bundle store directly."""

    def __init__(
        self,
        repository: TranslationRepository,
        bundles: StaticBundleStore,
    ) -> None:
        self._repository = repository
        self._bundles = bundles

    async def fetch_dynamic(self, language: str) -> dict[str, str]:
        try:
            return await self._repository.get_translations_for_language(language)
        except NotFoundError:
            return {}

    async def fetch_static(self, language: str) -> dict[str, str]:
        try:
            return await asyncio.to_thread(self._bundles.read, language)
        except NotFoundError:
            return {}


class HttpSource:
    """Remote source reading the public translation endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        if client is None:
            if base_url is None:
                raise ValueError("HttpSource needs a base_url or a client")
            client = httpx.AsyncClient(
                base_url=base_url,
                timeout=httpx.Timeout(timeout_seconds),
            )
        self._http = client

    async def fetch_dynamic(self, language: str) -> dict[str, str]:
        return await self._get_translations(f"/api/translations/{language}")

    async def fetch_static(self, language: str) -> dict[str, str]:
        return await self._get_translations(f"/api/static-translations/{language}")

    async def close(self) -> None:
        await self._http.aclose()

    async def _get_translations(self, path: str) -> dict[str, str]:
        resp = await self._http.get(path, headers={"Cache-Control": "no-cache"})
        if resp.status_code == 404:
            return {}
        resp.raise_for_status()
        return resp.json()["translations"]
