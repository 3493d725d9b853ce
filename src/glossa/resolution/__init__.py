"""Translation resolution with a fixed fallback chain."""

from glossa.resolution.engine import DerivedText, ResolutionEngine, ResolutionSnapshot
from glossa.resolution.sources import HttpSource, RepositorySource, TranslationSource

__all__ = [
    "DerivedText",
    "HttpSource",
    "RepositorySource",
    "ResolutionEngine",
    "ResolutionSnapshot",
    "TranslationSource",
]
