"""AI-assisted translation drafts.

The generator only ever returns candidate text. Persisting a draft is a
separate, explicit accept step that goes through the same upsert as a
manual edit, so a provider failure can never touch accepted content.
"""

from __future__ import annotations

import asyncio
import logging
import re

from pydantic import BaseModel, Field

from glossa.ai.languages import KNOWN_LANGUAGES, LANGUAGE_NOTES, KnownLanguage, language_name
from glossa.core.errors import UpstreamProviderError, ValidationError
from glossa.llm.client import LLMClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional translator specializing in software localization. "
    "Provide accurate, contextually appropriate translations that maintain the "
    "original meaning and tone."
)

DEFAULT_CONTEXT = "Task management application UI element"


def humanize_key(key: str) -> str:
    """Derive readable text from a key name.

    Takes the last dot segment and splits camelCase and snake_case into
    lower-case words: ``"message.confirm_delete"`` -> ``"confirm delete"``,
    ``"admin.yourName"`` -> ``"your name"``. A heuristic, used only when no
    source translation exists.
    """
    last = key.split(".")[-1] or key
    spaced = re.sub(r"([A-Z])", r" \1", last).replace("_", " ")
    readable = " ".join(spaced.lower().split())
    return readable or key


def build_prompt(
    key: str,
    source_text: str,
    source_language: str,
    target_language: str,
    context: str | None = None,
) -> str:
    lines = [
        f"Translate the following {language_name(source_language)} text "
        f"to {language_name(target_language)}:",
        "",
        f'Translation Key: "{key}"',
        f'Source Text: "{source_text}"',
    ]
    if context:
        lines.append(f"Context: {context}")
    lines += [
        "",
        "Instructions:",
        "- Provide only the translated text, no explanations",
        "- Maintain the original meaning and tone",
        "- For UI elements, keep translations concise",
    ]
    lines += [f"- {note}" for note in LANGUAGE_NOTES.get(target_language, [])]
    lines += ["", "Translation:"]
    return "\n".join(lines)


class BulkGenerationResult(BaseModel):
    """Per-language drafts for one key; failed languages appear in ``errors``."""

    key: str
    source_text: str
    source_language: str
    translations: dict[str, str] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return bool(self.errors) and bool(self.translations)


class TranslationGenerator:
    """Drafts translations through a text-generation provider.

    Args:
        client: Provider client. Its retry budget should be zero; callers
            own retries.
        temperature: Sampling temperature. Defaults to the client config.
    """

    def __init__(self, client: LLMClient, temperature: float | None = None) -> None:
        self._client = client
        self._temperature = (
            temperature if temperature is not None else client.config.temperature
        )

    @property
    def client(self) -> LLMClient:
        return self._client

    async def generate(
        self,
        key: str,
        source_text: str | None,
        source_language: str,
        target_language: str,
        context: str | None = None,
    ) -> str:
        """Return one draft translation of *key* into *target_language*.

        Raises:
            UpstreamProviderError: The provider failed or returned nothing.
        """
        text = self.source_text_for(key, source_text)
        prompt = build_prompt(key, text, source_language, target_language, context)
        try:
            raw = await self._client.generate(
                prompt,
                system_prompt=SYSTEM_PROMPT,
                temperature=self._temperature,
            )
        except Exception as exc:
            logger.warning(
                "Translation of %s to %s failed: %s", key, target_language, exc
            )
            reason = str(exc) or type(exc).__name__
            raise UpstreamProviderError(
                f"No candidate produced for {target_language}: {reason}",
                key=key,
                language=target_language,
            ) from exc

        candidate = self._clean(raw)
        if not candidate:
            raise UpstreamProviderError(
                f"No candidate produced for {target_language}: empty response",
                key=key,
                language=target_language,
            )
        return candidate

    async def generate_bulk(
        self,
        key: str,
        target_languages: list[str],
        *,
        source_text: str | None = None,
        source_language: str = "en",
        context: str | None = DEFAULT_CONTEXT,
    ) -> BulkGenerationResult:
        """Draft *key* into every target language concurrently.

        One provider request per language; a failure is recorded for that
        language and does not affect the others.
        """
        languages = list(dict.fromkeys(target_languages))
        if not languages:
            raise ValidationError("At least one target language is required")

        text = self.source_text_for(key, source_text)
        outcomes = await asyncio.gather(
            *(
                self.generate(key, text, source_language, lang, context)
                for lang in languages
            ),
            return_exceptions=True,
        )

        result = BulkGenerationResult(
            key=key, source_text=text, source_language=source_language
        )
        for lang, outcome in zip(languages, outcomes):
            if isinstance(outcome, UpstreamProviderError):
                result.errors[lang] = outcome.message
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.translations[lang] = outcome
        return result

    @staticmethod
    def source_text_for(key: str, source_text: str | None) -> str:
        """Text to translate: *source_text* when given, else the humanized key.

        A source equal to the key itself is an untranslated placeholder and is
        humanized as well. An empty string is a real source value.
        """
        if source_text is None or source_text == key:
            return humanize_key(key)
        return source_text

    @staticmethod
    def available_languages() -> list[KnownLanguage]:
        return list(KNOWN_LANGUAGES.values())

    async def is_available(self) -> bool:
        return await self._client.is_available()

    async def close(self) -> None:
        await self._client.close()

    @staticmethod
    def _clean(raw: str | None) -> str:
        if not raw:
            return ""
        text = raw.strip()
        if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
            text = text[1:-1].strip()
        return text
