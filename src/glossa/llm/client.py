"""Text-generation client interface, shared retry loop and factory function."""

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Any

import httpx

from glossa.core.config import LLMConfig

logger = logging.getLogger(__name__)


class LLMClient(abc.ABC):
    """Abstract base class for text-generation providers.

    Providers answer one prompt with one completion. A reply without any
    text comes back as ``None`` rather than an empty string or an error, so
    callers can tell "nothing produced" apart from transport failures.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abc.abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.3,
    ) -> str | None:
        """Return the completion text for *prompt*, or None if there is none."""

    @abc.abstractmethod
    async def is_available(self) -> bool:
        """Return True if the provider is reachable."""

    async def close(self) -> None:
        """Clean up resources. Override if the provider holds connections."""


async def request_with_retry(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    max_retries: int,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, retrying 5xx responses and transport errors.

    With ``max_retries=0`` (the default for drafts) the request is sent
    exactly once. The final response is checked with ``raise_for_status``.
    """
    attempts = max(1, max_retries + 1)
    for attempt in range(attempts):
        last = attempt == attempts - 1
        try:
            resp = await http.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            if last:
                raise
            delay = 0.5 * (2 ** attempt)
            logger.warning(
                "Transport error on %s: %s, retrying in %.1fs (%d/%d)",
                url, exc, delay, attempt + 1, attempts,
            )
            await asyncio.sleep(delay)
            continue
        if resp.status_code >= 500 and not last:
            delay = 0.5 * (2 ** attempt)
            logger.warning(
                "Request to %s returned %d, retrying in %.1fs (%d/%d)",
                url, resp.status_code, delay, attempt + 1, attempts,
            )
            await asyncio.sleep(delay)
            continue
        resp.raise_for_status()
        return resp

    raise AssertionError("unreachable")  # pragma: no cover


def create_llm_client(config: LLMConfig) -> LLMClient:
    """Factory: select and instantiate a provider based on config.provider."""

    from glossa.llm.providers import PROVIDER_REGISTRY

    provider = config.provider.lower()
    if provider not in PROVIDER_REGISTRY:
        available = ", ".join(sorted(PROVIDER_REGISTRY))
        raise ValueError(
            f"Unknown LLM provider {config.provider!r}. "
            f"Available: {available}"
        )

    cls = PROVIDER_REGISTRY[provider]
    return cls(config)
