"""Text-generation provider abstraction layer."""

from glossa.llm.client import LLMClient, create_llm_client

__all__ = ["LLMClient", "create_llm_client"]
