"""Domain models for languages, translation keys and translations."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from glossa.core.errors import PartialBatchFailure
from glossa.core.types import ErrorKind


class Language(BaseModel):
    id: str
    code: str
    name: str
    is_active: bool = True
    created_at: datetime


class TranslationKey(BaseModel):
    id: str
    key_name: str
    description: str | None = None
    category: str | None = None
    created_at: datetime
    updated_at: datetime


class Translation(BaseModel):
    id: str
    translation_key_id: str
    language_id: str
    value: str
    created_at: datetime
    updated_at: datetime


class TranslationCell(BaseModel):
    """One (key, language) cell in the admin coverage grid.

    ``translated`` is False when no row exists; ``value`` is then the empty
    placeholder and must not be read as an empty translation.
    """

    language_code: str
    language_name: str
    value: str = ""
    translated: bool = False


class TranslationWithDetails(BaseModel):
    id: str
    key_name: str
    description: str | None = None
    category: str | None = None
    translations: list[TranslationCell] = Field(default_factory=list)


class BatchError(BaseModel):
    """One failed entry of a batch operation."""

    item: str
    kind: ErrorKind
    message: str


class ImportResult(BaseModel):
    imported: int = 0
    errors: list[BatchError] = Field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def raise_for_errors(self) -> None:
        """Raise :class:`PartialBatchFailure` if any entry failed."""
        if self.errors:
            raise PartialBatchFailure(
                f"{len(self.errors)} entries failed, {self.imported} imported",
                result=self,
            )
