"""Protocol definitions for repository interfaces.

The admin service, the AI pipeline and the resolution sources depend on
these protocols rather than on the SQLAlchemy implementation, so tests can
substitute doubles where a real database is unnecessary.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from glossa.translations.models import (
    ImportResult,
    Language,
    Translation,
    TranslationKey,
    TranslationWithDetails,
)


@runtime_checkable
class TranslationRepository(Protocol):
    """Protocol for the relational translation store."""

    async def list_languages(self, active_only: bool = True) -> list[Language]: ...

    async def get_language(self, code: str) -> Language | None: ...

    async def create_language(
        self, code: str, name: str, is_active: bool = True
    ) -> Language: ...

    async def update_language(
        self,
        language_id: str,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> Language: ...

    async def upsert_language(
        self, code: str, name: str, is_active: bool = True
    ) -> Language: ...

    async def list_translation_keys(self) -> list[TranslationKey]: ...

    async def get_translation_key(self, key_id: str) -> TranslationKey | None: ...

    async def get_translation_key_by_name(
        self, key_name: str
    ) -> TranslationKey | None: ...

    async def create_translation_key(
        self,
        key_name: str,
        description: str | None = None,
        category: str | None = None,
    ) -> TranslationKey: ...

    async def update_translation_key(
        self, key_id: str, fields: dict[str, Any]
    ) -> TranslationKey: ...

    async def delete_translation_key(self, key_id: str) -> bool: ...

    async def list_translations_with_details(self) -> list[TranslationWithDetails]: ...

    async def get_translations_for_language(self, code: str) -> dict[str, str]: ...

    async def upsert_translation(
        self, key_id: str, language_code: str, value: str
    ) -> Translation: ...

    async def delete_translation(self, key_id: str, language_code: str) -> bool: ...

    async def export_all(
        self, include_inactive: bool = False
    ) -> dict[str, dict[str, str]]: ...

    async def import_all(self, data: dict[str, dict[str, str]]) -> ImportResult: ...
