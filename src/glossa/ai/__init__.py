"""AI-assisted translation drafting."""

from glossa.ai.generator import BulkGenerationResult, TranslationGenerator, humanize_key

__all__ = ["BulkGenerationResult", "TranslationGenerator", "humanize_key"]
