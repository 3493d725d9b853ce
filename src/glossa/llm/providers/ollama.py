"""Ollama provider using the ``/api/generate`` completion endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from glossa.core.config import LLMConfig
from glossa.llm.client import LLMClient, request_with_retry


class OllamaClient(LLMClient):
    """Drafts translations with a local Ollama model."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
        )

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.3,
    ) -> str | None:
        options: dict[str, Any] = {
            "temperature": temperature,
            "num_predict": self.config.max_tokens,
        }
        if self.config.top_p is not None:
            options["top_p"] = self.config.top_p
        payload: dict[str, Any] = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        if system_prompt is not None:
            payload["system"] = system_prompt

        resp = await request_with_retry(
            self._http, "POST", "/api/generate", self.config.max_retries, json=payload
        )
        return resp.json().get("response") or None

    async def is_available(self) -> bool:
        try:
            r = await self._http.get("/api/tags")
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._http.aclose()
