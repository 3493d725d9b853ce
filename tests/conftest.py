"""Shared test fixtures and helpers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from glossa.auth.models import Identity
from glossa.bundles.store import StaticBundleStore
from glossa.core.config import LLMConfig
from glossa.core.types import Role
from glossa.db.engine import DatabaseManager
from glossa.llm.client import LLMClient
from glossa.repositories.postgres.translations import PostgresTranslationRepository

ADMIN = Identity(user_id="admin@example.com", role=Role.ADMIN)
USER = Identity(user_id="user@example.com", role=Role.USER)


class FakeLLMClient(LLMClient):
    """LLM client returning canned replies per target language.

    ``replies`` maps a language name (as it appears in the prompt) to the
    reply text, or to an exception instance to raise.
    """

    def __init__(self, replies: dict[str, str | Exception] | None = None) -> None:
        super().__init__(LLMConfig(provider="openai", base_url="http://llm.test"))
        self.replies = replies or {}
        self.prompts: list[str] = []
        self.available = True
        self.closed = False

    async def generate(self, prompt, *, system_prompt=None, temperature=0.3):
        self.prompts.append(prompt)
        for name, reply in self.replies.items():
            if f"to {name}" in prompt:
                if isinstance(reply, Exception):
                    raise reply
                return reply
        return ""

    async def is_available(self):
        return self.available

    async def close(self):
        self.closed = True


def write_bundle(directory: Path, code: str, document: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{code}.json"
    path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
async def db_manager():
    """DatabaseManager on an in-memory SQLite database with the schema created."""
    manager = DatabaseManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.close()


@pytest.fixture
async def repo(db_manager):
    return PostgresTranslationRepository(db_manager)


@pytest.fixture
def bundle_store(tmp_path):
    locales = tmp_path / "locales"
    write_bundle(locales, "en", {"nav.tasks": "Tasks", "nav.home": "Home"})
    return StaticBundleStore(locales)
