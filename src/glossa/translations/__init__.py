"""Translation domain models and input rules."""

from glossa.translations.models import (
    BatchError,
    ImportResult,
    Language,
    Translation,
    TranslationCell,
    TranslationKey,
    TranslationWithDetails,
)

__all__ = [
    "BatchError",
    "ImportResult",
    "Language",
    "Translation",
    "TranslationCell",
    "TranslationKey",
    "TranslationWithDetails",
]
