"""Admin operations on translation content.

Every mutation is authorized against the caller's identity and recorded in
the audit sink, whether it succeeds or fails. Audit recording never breaks
the mutation it describes: sink failures are logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from glossa.ai.generator import BulkGenerationResult, TranslationGenerator
from glossa.ai.languages import KnownLanguage
from glossa.auth.models import Identity
from glossa.bundles.store import BundleBackup, BundleWriteResult, StaticBundleStore
from glossa.core.errors import (
    AuthenticationRequired,
    LocalizationError,
    NotFoundError,
    PermissionDenied,
)
from glossa.core.types import AuditEvent, HealthStatus
from glossa.governance.audit import AuditSink
from glossa.llm.health import check_llm_health
from glossa.repositories.protocols import TranslationRepository
from glossa.translations.models import (
    ImportResult,
    Language,
    Translation,
    TranslationKey,
    TranslationWithDetails,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def authorize(actor: Identity | None) -> Identity:
    """Return *actor* if it carries the admin role."""
    if actor is None:
        raise AuthenticationRequired("Authentication required")
    if not actor.is_admin:
        raise PermissionDenied(
            f"User {actor.user_id} lacks the admin role", user_id=actor.user_id
        )
    return actor


class LocalizationAdmin:
    """Role-gated, audited facade over the repository, bundles and AI drafts.

    Args:
        repository: Relational translation store.
        bundles: Static locale bundle store.
        generator: AI draft generator. Optional; AI operations raise
            NotFoundError when absent.
        audit: Audit sink. Optional; mutations are not recorded when absent.
    """

    def __init__(
        self,
        repository: TranslationRepository,
        bundles: StaticBundleStore,
        generator: TranslationGenerator | None = None,
        audit: AuditSink | None = None,
    ) -> None:
        self._repository = repository
        self._bundles = bundles
        self._generator = generator
        self._audit = audit

    @property
    def repository(self) -> TranslationRepository:
        return self._repository

    @property
    def bundles(self) -> StaticBundleStore:
        return self._bundles

    # -- Languages ---------------------------------------------------------

    async def list_languages(
        self, actor: Identity | None, active_only: bool = False
    ) -> list[Language]:
        authorize(actor)
        return await self._repository.list_languages(active_only=active_only)

    async def create_language(
        self,
        actor: Identity | None,
        code: str,
        name: str,
        is_active: bool = True,
    ) -> Language:
        return await self._mutate(
            actor,
            "language.create",
            f"language:{code}",
            lambda: self._repository.create_language(code, name, is_active),
            name=name,
            is_active=is_active,
        )

    async def update_language(
        self,
        actor: Identity | None,
        language_id: str,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> Language:
        return await self._mutate(
            actor,
            "language.update",
            f"language:{language_id}",
            lambda: self._repository.update_language(language_id, name, is_active),
            name=name,
            is_active=is_active,
        )

    # -- Translation keys --------------------------------------------------

    async def list_translation_keys(self, actor: Identity | None) -> list[TranslationKey]:
        authorize(actor)
        return await self._repository.list_translation_keys()

    async def create_translation_key(
        self,
        actor: Identity | None,
        key_name: str,
        description: str | None = None,
        category: str | None = None,
    ) -> TranslationKey:
        return await self._mutate(
            actor,
            "key.create",
            f"key:{key_name}",
            lambda: self._repository.create_translation_key(
                key_name, description, category
            ),
            category=category,
        )

    async def update_translation_key(
        self,
        actor: Identity | None,
        key_id: str,
        fields: dict[str, Any],
    ) -> TranslationKey:
        return await self._mutate(
            actor,
            "key.update",
            f"key:{key_id}",
            lambda: self._repository.update_translation_key(key_id, fields),
            fields=sorted(fields),
        )

    async def delete_translation_key(self, actor: Identity | None, key_id: str) -> None:
        async def delete() -> None:
            if not await self._repository.delete_translation_key(key_id):
                raise NotFoundError(f"Translation key {key_id} not found", key_id=key_id)

        await self._mutate(actor, "key.delete", f"key:{key_id}", delete)

    # -- Translations ------------------------------------------------------

    async def list_translations(
        self, actor: Identity | None
    ) -> list[TranslationWithDetails]:
        authorize(actor)
        return await self._repository.list_translations_with_details()

    async def upsert_translation(
        self,
        actor: Identity | None,
        key_id: str,
        language_code: str,
        value: str,
    ) -> Translation:
        return await self._mutate(
            actor,
            "translation.upsert",
            f"translation:{key_id}/{language_code}",
            lambda: self._repository.upsert_translation(key_id, language_code, value),
        )

    async def delete_translation(
        self, actor: Identity | None, key_id: str, language_code: str
    ) -> None:
        async def delete() -> None:
            if not await self._repository.delete_translation(key_id, language_code):
                raise NotFoundError(
                    f"No {language_code} translation for key {key_id}",
                    key_id=key_id,
                    language=language_code,
                )

        await self._mutate(
            actor,
            "translation.delete",
            f"translation:{key_id}/{language_code}",
            delete,
        )

    async def export_translations(
        self, actor: Identity | None, include_inactive: bool = False
    ) -> dict[str, dict[str, str]]:
        authorize(actor)
        return await self._repository.export_all(include_inactive=include_inactive)

    async def import_translations(
        self, actor: Identity | None, data: dict[str, dict[str, str]]
    ) -> ImportResult:
        identity = self._authorize(actor, "translation.import", "translations")
        result = await self._repository.import_all(data)
        self._record(
            identity,
            "translation.import",
            "translations",
            success=not result.errors,
            imported=result.imported,
            errors=len(result.errors),
        )
        return result

    # -- AI drafts ---------------------------------------------------------

    async def generate(
        self,
        actor: Identity | None,
        key: str,
        target_language: str,
        *,
        source_language: str = "en",
        source_text: str | None = None,
        context: str | None = None,
    ) -> str:
        """Draft one translation. Nothing is persisted."""
        authorize(actor)
        generator = self._require_generator()
        if source_text is None:
            source_text = await self._source_text(key, source_language)
        return await generator.generate(
            key, source_text, source_language, target_language, context
        )

    async def generate_bulk(
        self,
        actor: Identity | None,
        key: str,
        target_languages: list[str],
        *,
        source_language: str = "en",
        source_text: str | None = None,
        context: str | None = None,
    ) -> BulkGenerationResult:
        """Draft *key* into several languages. Nothing is persisted."""
        authorize(actor)
        generator = self._require_generator()
        if source_text is None:
            source_text = await self._source_text(key, source_language)
        kwargs: dict[str, Any] = {}
        if context is not None:
            kwargs["context"] = context
        return await generator.generate_bulk(
            key,
            target_languages,
            source_text=source_text,
            source_language=source_language,
            **kwargs,
        )

    async def accept_generated(
        self,
        actor: Identity | None,
        key_name: str,
        language_code: str,
        value: str,
    ) -> Translation:
        """Persist an accepted draft through the same upsert as a manual edit."""

        async def accept() -> Translation:
            key = await self._repository.get_translation_key_by_name(key_name)
            if key is None:
                raise NotFoundError(
                    f"Translation key {key_name} not found", key=key_name
                )
            return await self._repository.upsert_translation(key.id, language_code, value)

        return await self._mutate(
            actor,
            "translation.accept",
            f"translation:{key_name}/{language_code}",
            accept,
        )

    def ai_languages(self, actor: Identity | None) -> list[KnownLanguage]:
        authorize(actor)
        return TranslationGenerator.available_languages()

    async def ai_health(self, actor: Identity | None) -> HealthStatus:
        """Reachability and latency of the text-generation provider."""
        authorize(actor)
        if self._generator is None:
            return HealthStatus(service="llm", healthy=False)
        return await check_llm_health(self._generator.client)

    # -- Static bundles ----------------------------------------------------

    async def put_static(
        self, actor: Identity | None, language_code: str, document: Any
    ) -> BundleWriteResult:
        return await self._mutate(
            actor,
            "static.write",
            f"static:{language_code}",
            lambda: asyncio.to_thread(self._bundles.write, language_code, document),
        )

    async def list_static_backups(
        self, actor: Identity | None, language_code: str
    ) -> list[BundleBackup]:
        authorize(actor)
        return await asyncio.to_thread(self._bundles.list_backups, language_code)

    async def restore_static(
        self, actor: Identity | None, language_code: str, backup_name: str
    ) -> BundleWriteResult:
        return await self._mutate(
            actor,
            "static.restore",
            f"static:{language_code}",
            lambda: asyncio.to_thread(
                self._bundles.restore_backup, language_code, backup_name
            ),
            backup=backup_name,
        )

    # -- Internals ---------------------------------------------------------

    async def _mutate(
        self,
        actor: Identity | None,
        action: str,
        resource: str,
        operation: Callable[[], Awaitable[T]],
        **detail: Any,
    ) -> T:
        identity = self._authorize(actor, action, resource)
        try:
            result = await operation()
        except LocalizationError as exc:
            self._record(
                identity, action, resource,
                success=False, error=exc.message, kind=str(exc.kind), **detail,
            )
            raise
        except Exception as exc:
            self._record(
                identity, action, resource,
                success=False, error=str(exc) or type(exc).__name__, **detail,
            )
            raise
        self._record(identity, action, resource, **detail)
        return result

    def _authorize(self, actor: Identity | None, action: str, resource: str) -> Identity:
        try:
            return authorize(actor)
        except PermissionDenied as exc:
            if actor is not None:
                self._record(actor, action, resource, success=False, error=exc.message)
            raise

    def _record(
        self,
        identity: Identity,
        action: str,
        resource: str,
        success: bool = True,
        **detail: Any,
    ) -> None:
        if self._audit is None:
            return
        event = AuditEvent(
            actor=identity.user_id,
            action=action,
            resource=resource,
            success=success,
            detail={k: v for k, v in detail.items() if v is not None},
        )
        try:
            self._audit.log(event)
        except OSError as exc:
            logger.error("Failed to record audit event %s on %s: %s", action, resource, exc)

    def _require_generator(self) -> TranslationGenerator:
        if self._generator is None:
            raise NotFoundError("AI translation is not configured")
        return self._generator

    async def _source_text(self, key: str, source_language: str) -> str | None:
        try:
            translations = await self._repository.get_translations_for_language(
                source_language
            )
        except NotFoundError:
            return None
        return translations.get(key)
