"""PostgreSQL translation repository.

Runs on any SQLAlchemy async engine whose dialect supports
``INSERT ... ON CONFLICT DO UPDATE`` (PostgreSQL in production, SQLite via
aiosqlite in tests). There is no in-process cache: every call opens a
session from the pool so edits made by other sessions are visible at once.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import and_, delete, select, true
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from glossa.core.errors import (
    ConflictError,
    LocalizationError,
    NotFoundError,
    ValidationError,
)
from glossa.core.types import ErrorKind
from glossa.db.engine import DatabaseManager, retry_transient
from glossa.db.models import LanguageRow, TranslationKeyRow, TranslationRow, new_id
from glossa.translations.models import (
    BatchError,
    ImportResult,
    Language,
    Translation,
    TranslationCell,
    TranslationKey,
    TranslationWithDetails,
)
from glossa.translations.validation import (
    validate_category,
    validate_description,
    validate_key_name,
    validate_language_code,
    validate_language_name,
    validate_value,
)

logger = logging.getLogger(__name__)

_UPDATABLE_KEY_FIELDS = ("description", "category")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostgresTranslationRepository:
    """Postgres-backed store of languages, translation keys and translations."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    # -- languages -----------------------------------------------------------

    @retry_transient
    async def list_languages(self, active_only: bool = True) -> list[Language]:
        async with self._db.session() as db:
            stmt = select(LanguageRow).order_by(LanguageRow.name)
            if active_only:
                stmt = stmt.where(LanguageRow.is_active.is_(True))
            result = await db.execute(stmt)
            return [self._row_to_language(r) for r in result.scalars().all()]

    @retry_transient
    async def get_language(self, code: str) -> Language | None:
        async with self._db.session() as db:
            row = await self._language_by_code(db, code)
            return self._row_to_language(row) if row is not None else None

    @retry_transient
    async def create_language(
        self, code: str, name: str, is_active: bool = True
    ) -> Language:
        code = validate_language_code(code)
        name = validate_language_name(name)
        async with self._db.session() as db:
            if await self._language_by_code(db, code) is not None:
                raise ConflictError(f"Language {code!r} already exists", code=code)
            row = LanguageRow(
                id=new_id(),
                code=code,
                name=name,
                is_active=is_active,
                created_at=_utcnow(),
            )
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                raise ConflictError(f"Language {code!r} already exists", code=code) from exc
            logger.info("Created language %s (%s)", code, name)
            return self._row_to_language(row)

    @retry_transient
    async def update_language(
        self,
        language_id: str,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> Language:
        async with self._db.session() as db:
            row = await db.get(LanguageRow, language_id)
            if row is None:
                raise NotFoundError(f"Language {language_id!r} not found")
            if name is not None:
                row.name = validate_language_name(name)
            if is_active is not None:
                row.is_active = is_active
            await db.commit()
            return self._row_to_language(row)

    async def upsert_language(
        self, code: str, name: str, is_active: bool = True
    ) -> Language:
        """Create the language, or update name/activation if the code exists."""
        existing = await self.get_language(code)
        if existing is None:
            return await self.create_language(code, name, is_active)
        return await self.update_language(existing.id, name=name, is_active=is_active)

    # -- translation keys ----------------------------------------------------

    @retry_transient
    async def list_translation_keys(self) -> list[TranslationKey]:
        async with self._db.session() as db:
            result = await db.execute(
                select(TranslationKeyRow).order_by(
                    TranslationKeyRow.category, TranslationKeyRow.key_name
                )
            )
            return [self._row_to_key(r) for r in result.scalars().all()]

    @retry_transient
    async def get_translation_key(self, key_id: str) -> TranslationKey | None:
        async with self._db.session() as db:
            row = await db.get(TranslationKeyRow, key_id)
            return self._row_to_key(row) if row is not None else None

    @retry_transient
    async def get_translation_key_by_name(self, key_name: str) -> TranslationKey | None:
        async with self._db.session() as db:
            row = await self._key_by_name(db, key_name)
            return self._row_to_key(row) if row is not None else None

    @retry_transient
    async def create_translation_key(
        self,
        key_name: str,
        description: str | None = None,
        category: str | None = None,
    ) -> TranslationKey:
        key_name = validate_key_name(key_name)
        description = validate_description(description)
        category = validate_category(category)
        async with self._db.session() as db:
            if await self._key_by_name(db, key_name) is not None:
                raise ConflictError(
                    f"Translation key {key_name!r} already exists", key_name=key_name
                )
            now = _utcnow()
            row = TranslationKeyRow(
                id=new_id(),
                key_name=key_name,
                description=description,
                category=category,
                created_at=now,
                updated_at=now,
            )
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                raise ConflictError(
                    f"Translation key {key_name!r} already exists", key_name=key_name
                ) from exc
            return self._row_to_key(row)

    @retry_transient
    async def update_translation_key(
        self, key_id: str, fields: dict[str, Any]
    ) -> TranslationKey:
        """Update description and/or category. ``key_name`` is immutable."""
        if "key_name" in fields:
            raise ValidationError(
                "key_name cannot be changed after creation", key_id=key_id
            )
        unknown = sorted(set(fields) - set(_UPDATABLE_KEY_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown translation key fields: {', '.join(unknown)}")
        if "description" in fields:
            validate_description(fields["description"])
        if "category" in fields:
            validate_category(fields["category"])

        async with self._db.session() as db:
            row = await db.get(TranslationKeyRow, key_id)
            if row is None:
                raise NotFoundError(f"Translation key {key_id!r} not found")
            if fields:
                for name, value in fields.items():
                    setattr(row, name, value)
                row.updated_at = _utcnow()
                await db.commit()
            return self._row_to_key(row)

    @retry_transient
    async def delete_translation_key(self, key_id: str) -> bool:
        """Delete a key and every translation referencing it, atomically."""
        async with self._db.session() as db:
            row = await db.get(TranslationKeyRow, key_id)
            if row is None:
                return False
            await db.execute(
                delete(TranslationRow).where(TranslationRow.translation_key_id == key_id)
            )
            key_name = row.key_name
            await db.delete(row)
            await db.commit()
            logger.info("Deleted translation key %s with its translations", key_name)
            return True

    # -- translations --------------------------------------------------------

    @retry_transient
    async def list_translations_with_details(self) -> list[TranslationWithDetails]:
        """Every key crossed with every active language, placeholders included."""
        stmt = (
            select(
                TranslationKeyRow.id,
                TranslationKeyRow.key_name,
                TranslationKeyRow.description,
                TranslationKeyRow.category,
                LanguageRow.code,
                LanguageRow.name,
                TranslationRow.id.label("translation_id"),
                TranslationRow.value,
            )
            .select_from(TranslationKeyRow)
            .join(LanguageRow, true())
            .outerjoin(
                TranslationRow,
                and_(
                    TranslationRow.translation_key_id == TranslationKeyRow.id,
                    TranslationRow.language_id == LanguageRow.id,
                ),
            )
            .where(LanguageRow.is_active.is_(True))
            .order_by(
                TranslationKeyRow.category,
                TranslationKeyRow.key_name,
                LanguageRow.name,
            )
        )
        async with self._db.session() as db:
            result = await db.execute(stmt)
            rows = result.all()

        grid: dict[str, TranslationWithDetails] = {}
        for r in rows:
            entry = grid.get(r.id)
            if entry is None:
                entry = TranslationWithDetails(
                    id=r.id,
                    key_name=r.key_name,
                    description=r.description,
                    category=r.category,
                )
                grid[r.id] = entry
            entry.translations.append(
                TranslationCell(
                    language_code=r.code,
                    language_name=r.name,
                    value=r.value if r.translation_id is not None else "",
                    translated=r.translation_id is not None,
                )
            )
        return list(grid.values())

    @retry_transient
    async def get_translations_for_language(self, code: str) -> dict[str, str]:
        """Flat key -> value map for one language.

        Raises NotFoundError for an unknown code; an inactive language
        yields an empty map.
        """
        async with self._db.session() as db:
            language = await self._language_by_code(db, code)
            if language is None:
                raise NotFoundError(f"Language {code!r} not found", code=code)
            if not language.is_active:
                return {}
            result = await db.execute(
                select(TranslationKeyRow.key_name, TranslationRow.value)
                .join(TranslationRow, TranslationRow.translation_key_id == TranslationKeyRow.id)
                .where(TranslationRow.language_id == language.id)
            )
            return {key_name: value for key_name, value in result.all()}

    @retry_transient
    async def upsert_translation(
        self, key_id: str, language_code: str, value: str
    ) -> Translation:
        """Insert or update the single row for (key, language) atomically."""
        value = validate_value(value)
        async with self._db.session() as db:
            language = await self._language_by_code(db, language_code)
            if language is None:
                raise NotFoundError(
                    f"Language {language_code!r} not found", code=language_code
                )
            if await db.get(TranslationKeyRow, key_id) is None:
                raise NotFoundError(f"Translation key {key_id!r} not found")

            now = _utcnow()
            insert = self._dialect_insert()
            stmt = insert(TranslationRow).values(
                id=new_id(),
                translation_key_id=key_id,
                language_id=language.id,
                value=value,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["translation_key_id", "language_id"],
                set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
            )
            await db.execute(stmt)
            await db.commit()

            result = await db.execute(
                select(TranslationRow).where(
                    TranslationRow.translation_key_id == key_id,
                    TranslationRow.language_id == language.id,
                )
            )
            return self._row_to_translation(result.scalar_one())

    @retry_transient
    async def delete_translation(self, key_id: str, language_code: str) -> bool:
        async with self._db.session() as db:
            language = await self._language_by_code(db, language_code)
            if language is None:
                return False
            result = await db.execute(
                delete(TranslationRow).where(
                    TranslationRow.translation_key_id == key_id,
                    TranslationRow.language_id == language.id,
                )
            )
            await db.commit()
            return result.rowcount > 0

    # -- export / import -----------------------------------------------------

    @retry_transient
    async def export_all(self, include_inactive: bool = False) -> dict[str, dict[str, str]]:
        """Nested language -> key -> value map of existing rows."""
        stmt = (
            select(LanguageRow.code, TranslationKeyRow.key_name, TranslationRow.value)
            .select_from(TranslationRow)
            .join(LanguageRow, TranslationRow.language_id == LanguageRow.id)
            .join(TranslationKeyRow, TranslationRow.translation_key_id == TranslationKeyRow.id)
            .order_by(LanguageRow.code, TranslationKeyRow.key_name)
        )
        if not include_inactive:
            stmt = stmt.where(LanguageRow.is_active.is_(True))
        async with self._db.session() as db:
            result = await db.execute(stmt)
            exported: dict[str, dict[str, str]] = {}
            for code, key_name, value in result.all():
                exported.setdefault(code, {})[key_name] = value
            return exported

    async def import_all(self, data: dict[str, dict[str, str]]) -> ImportResult:
        """Apply every entry as its own upsert, collecting per-entry errors.

        Not transactional across the batch: entries applied before a
        failure stay applied.
        """
        if not isinstance(data, dict):
            raise ValidationError("Import data must map language codes to key/value maps")

        result = ImportResult()
        for language_code, entries in data.items():
            language = await self.get_language(language_code)
            if language is None:
                result.errors.append(
                    BatchError(
                        item=language_code,
                        kind=ErrorKind.NOT_FOUND,
                        message=f"Language {language_code} not found",
                    )
                )
                continue
            if not isinstance(entries, dict):
                result.errors.append(
                    BatchError(
                        item=language_code,
                        kind=ErrorKind.VALIDATION,
                        message=f"Entries for {language_code} must be a key/value map",
                    )
                )
                continue

            for key_name, value in entries.items():
                item = f"{language_code}.{key_name}"
                try:
                    key = await self.get_translation_key_by_name(key_name)
                    if key is None:
                        raise NotFoundError(f"Translation key {key_name} not found")
                    await self.upsert_translation(key.id, language_code, value)
                except LocalizationError as exc:
                    result.errors.append(
                        BatchError(item=item, kind=exc.kind, message=exc.message)
                    )
                    continue
                except SQLAlchemyError as exc:
                    logger.warning("Import of %s failed: %s", item, exc)
                    result.errors.append(
                        BatchError(
                            item=item,
                            kind=ErrorKind.PARTIAL_BATCH,
                            message=f"Error importing {item}: {exc}",
                        )
                    )
                    continue
                result.imported += 1

        if result.errors:
            logger.warning(
                "Import finished with %d errors (%d imported)",
                len(result.errors), result.imported,
            )
        return result

    # -- internal ------------------------------------------------------------

    def _dialect_insert(self) -> Any:
        dialect = self._db.dialect_name
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise NotImplementedError(f"Atomic upsert is not supported on {dialect!r}")

    @staticmethod
    async def _language_by_code(db: AsyncSession, code: str) -> LanguageRow | None:
        result = await db.execute(select(LanguageRow).where(LanguageRow.code == code))
        return result.scalar_one_or_none()

    @staticmethod
    async def _key_by_name(db: AsyncSession, key_name: str) -> TranslationKeyRow | None:
        result = await db.execute(
            select(TranslationKeyRow).where(TranslationKeyRow.key_name == key_name)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _row_to_language(row: LanguageRow) -> Language:
        return Language(
            id=row.id,
            code=row.code,
            name=row.name,
            is_active=row.is_active,
            created_at=row.created_at,
        )

    @staticmethod
    def _row_to_key(row: TranslationKeyRow) -> TranslationKey:
        return TranslationKey(
            id=row.id,
            key_name=row.key_name,
            description=row.description,
            category=row.category,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _row_to_translation(row: TranslationRow) -> Translation:
        return Translation(
            id=row.id,
            translation_key_id=row.translation_key_id,
            language_id=row.language_id,
            value=row.value,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
