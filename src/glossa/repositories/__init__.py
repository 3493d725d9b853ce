"""Persistence for languages, translation keys and translations."""

from glossa.repositories.protocols import TranslationRepository

__all__ = ["TranslationRepository"]
