"""Tests for the role-gated, audited admin service."""

from __future__ import annotations

import httpx
import pytest

from glossa.admin.service import LocalizationAdmin
from glossa.ai.generator import TranslationGenerator
from glossa.core.config import AuditConfig
from glossa.core.errors import (
    AuthenticationRequired,
    ConflictError,
    NotFoundError,
    PermissionDenied,
)
from glossa.core.types import AuditEvent
from glossa.governance.audit import AuditLogger

from conftest import ADMIN, USER, FakeLLMClient


class BrokenSink:
    def log(self, event: AuditEvent) -> None:
        raise OSError("disk full")


@pytest.fixture
def audit(tmp_path):
    return AuditLogger(config=AuditConfig(log_dir=str(tmp_path / "audit")))


@pytest.fixture
def llm():
    return FakeLLMClient(
        {"French": "Tâches", "Spanish": "Tareas", "German": httpx.ConnectError("refused")}
    )


@pytest.fixture
def admin(repo, bundle_store, llm, audit):
    return LocalizationAdmin(repo, bundle_store, TranslationGenerator(llm), audit)


async def _seed(admin):
    await admin.create_language(ADMIN, "en", "English")
    await admin.create_language(ADMIN, "fr", "French")
    return await admin.create_translation_key(ADMIN, "nav.tasks", category="nav")


class TestAuthorization:
    async def test_anonymous_is_rejected(self, admin):
        with pytest.raises(AuthenticationRequired):
            await admin.create_language(None, "fr", "French")

    async def test_user_role_is_rejected_and_audited(self, admin, audit):
        with pytest.raises(PermissionDenied):
            await admin.create_language(USER, "fr", "French")

        events = audit.query({"action": "language.create"})
        assert len(events) == 1
        assert events[0].actor == USER.user_id
        assert events[0].success is False

    async def test_reads_require_admin(self, admin):
        with pytest.raises(PermissionDenied):
            await admin.list_translations(USER)
        with pytest.raises(AuthenticationRequired):
            await admin.export_translations(None)


class TestAuditing:
    async def test_success_and_failure_are_recorded(self, admin, audit):
        await admin.create_language(ADMIN, "fr", "French")
        with pytest.raises(ConflictError):
            await admin.create_language(ADMIN, "fr", "French")

        events = audit.query({"action": "language.create"})
        assert [e.success for e in events] == [True, False]
        assert events[1].detail["kind"] == "conflict"
        assert audit.verify_chain() is True

    async def test_sink_failure_does_not_break_mutation(self, repo, bundle_store):
        admin = LocalizationAdmin(repo, bundle_store, audit=BrokenSink())
        language = await admin.create_language(ADMIN, "fr", "French")
        assert language.code == "fr"
        assert (await repo.get_language("fr")) is not None


class TestKeysAndTranslations:
    async def test_delete_unknown_key_is_not_found(self, admin):
        with pytest.raises(NotFoundError):
            await admin.delete_translation_key(ADMIN, "missing")

    async def test_delete_key_removes_translations(self, admin, repo):
        key = await _seed(admin)
        await admin.upsert_translation(ADMIN, key.id, "fr", "Tâches")
        await admin.delete_translation_key(ADMIN, key.id)
        assert await repo.get_translations_for_language("fr") == {}

    async def test_delete_missing_translation_is_not_found(self, admin):
        key = await _seed(admin)
        with pytest.raises(NotFoundError):
            await admin.delete_translation(ADMIN, key.id, "fr")

    async def test_import_is_audited_with_counts(self, admin, audit):
        await _seed(admin)
        result = await admin.import_translations(
            ADMIN, {"fr": {"nav.tasks": "Tâches"}, "xx": {"nav.tasks": "?"}}
        )
        assert result.imported == 1
        assert result.messages == ["Language xx not found"]

        (event,) = audit.query({"action": "translation.import"})
        assert event.success is False
        assert event.detail == {"imported": 1, "errors": 1}


class TestAIDrafts:
    async def test_generate_uses_stored_source_text(self, admin, llm):
        key = await _seed(admin)
        await admin.upsert_translation(ADMIN, key.id, "en", "My Tasks")

        draft = await admin.generate(ADMIN, "nav.tasks", "fr")

        assert draft == "Tâches"
        assert 'Source Text: "My Tasks"' in llm.prompts[0]

    async def test_bulk_persists_nothing_until_accept(self, admin, repo):
        await _seed(admin)
        await admin.create_language(ADMIN, "es", "Spanish")
        await admin.create_language(ADMIN, "de", "German")

        result = await admin.generate_bulk(ADMIN, "nav.tasks", ["fr", "es", "de"])

        assert result.translations == {"fr": "Tâches", "es": "Tareas"}
        assert set(result.errors) == {"de"}
        assert await repo.export_all() == {}

        await admin.accept_generated(ADMIN, "nav.tasks", "fr", result.translations["fr"])
        assert await repo.export_all() == {"fr": {"nav.tasks": "Tâches"}}

    async def test_accept_unknown_key(self, admin):
        await _seed(admin)
        with pytest.raises(NotFoundError):
            await admin.accept_generated(ADMIN, "nav.ghost", "fr", "Fantôme")

    async def test_ai_health(self, admin):
        health = await admin.ai_health(ADMIN)
        assert health.healthy is True

    async def test_without_generator(self, repo, bundle_store):
        admin = LocalizationAdmin(repo, bundle_store)
        with pytest.raises(NotFoundError):
            await admin.generate(ADMIN, "nav.tasks", "fr")
        assert (await admin.ai_health(ADMIN)).healthy is False


class TestStaticBundles:
    async def test_put_static_backs_up_and_audits(self, admin, bundle_store, audit):
        result = await admin.put_static(ADMIN, "en", {"nav.tasks": "My Tasks"})

        assert result.backup_created is True
        assert bundle_store.read("en") == {"nav.tasks": "My Tasks"}
        backups = await admin.list_static_backups(ADMIN, "en")
        assert [b.name for b in backups] == [result.backup_name]
        assert audit.query({"action": "static.write"})[0].success is True

    async def test_restore(self, admin, bundle_store):
        result = await admin.put_static(ADMIN, "en", {"nav.tasks": "My Tasks"})
        await admin.restore_static(ADMIN, "en", result.backup_name)
        assert bundle_store.read("en")["nav.tasks"] == "Tasks"

    async def test_failed_write_is_audited(self, admin, bundle_store, audit, monkeypatch):
        def fail(code, document):
            raise OSError("read-only file system")

        monkeypatch.setattr(bundle_store, "write", fail)
        with pytest.raises(OSError):
            await admin.put_static(ADMIN, "en", {"nav.tasks": "My Tasks"})

        (event,) = audit.query({"action": "static.write"})
        assert event.success is False
        assert event.detail == {"error": "read-only file system"}

    async def test_put_static_requires_admin(self, admin, bundle_store):
        with pytest.raises(PermissionDenied):
            await admin.put_static(USER, "en", {"nav.tasks": "Hacked"})
        assert bundle_store.read("en")["nav.tasks"] == "Tasks"
