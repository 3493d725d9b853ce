"""OpenAI-compatible provider (OpenAI, vLLM, llama-cpp-python, etc.)."""

from __future__ import annotations

from typing import Any

import httpx

from glossa.core.config import LLMConfig
from glossa.llm.client import LLMClient, request_with_retry


class OpenAICompatClient(LLMClient):
    """Drafts translations through any server exposing /v1/chat/completions.

    The prompt is sent as a single user turn after the optional system
    instructions; only the first choice is read.
    """

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        headers: dict[str, str] = {}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            headers=headers,
        )

    async def generate(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float = 0.3,
    ) -> str | None:
        messages: list[dict[str, str]] = []
        if system_prompt is not None:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "temperature": temperature,
            "stream": False,
            "max_tokens": self.config.max_tokens,
        }
        if self.config.top_p is not None:
            payload["top_p"] = self.config.top_p

        resp = await request_with_retry(
            self._http, "POST", "/v1/chat/completions", self.config.max_retries, json=payload
        )
        return self._first_choice_text(resp.json())

    async def is_available(self) -> bool:
        try:
            r = await self._http.get("/v1/models")
            return r.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _first_choice_text(data: dict[str, Any]) -> str | None:
        choices = data.get("choices") or []
        if not choices:
            return None
        message = choices[0].get("message") or {}
        return message.get("content") or None
