"""Provider registry for text-generation backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glossa.llm.client import LLMClient

from glossa.llm.providers.ollama import OllamaClient
from glossa.llm.providers.openai_compat import OpenAICompatClient

PROVIDER_REGISTRY: dict[str, type[LLMClient]] = {
    "ollama": OllamaClient,
    "openai": OpenAICompatClient,
    "vllm": OpenAICompatClient,
}

__all__ = ["PROVIDER_REGISTRY", "OllamaClient", "OpenAICompatClient"]
