"""API tests for the translation, admin, AI and static bundle endpoints."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from glossa.ai.generator import TranslationGenerator
from glossa.auth.provider import StaticTokenProvider
from glossa.core.config import AuditConfig, BundleConfig, DatabaseConfig, Settings
from glossa.core.types import Role
from glossa.web.app import create_app

from conftest import FakeLLMClient, write_bundle


@pytest.fixture
def tokens():
    provider = StaticTokenProvider()
    return provider, {
        "admin": {"Authorization": f"Bearer {provider.issue('admin@example.com', Role.ADMIN)}"},
        "user": {"Authorization": f"Bearer {provider.issue('user@example.com', Role.USER)}"},
    }


@pytest.fixture
def llm():
    return FakeLLMClient(
        {"French": "Tâches", "Spanish": "Tareas", "German": httpx.ConnectError("refused")}
    )


@pytest.fixture
def client(tmp_path, tokens, llm):
    locales = tmp_path / "locales"
    write_bundle(locales, "en", {"nav.tasks": "Tasks", "nav.home": "Home"})
    settings = Settings(
        db=DatabaseConfig(database_url=f"sqlite+aiosqlite:///{tmp_path}/glossa.db"),
        bundles=BundleConfig(locales_dir=str(locales)),
        audit=AuditConfig(log_dir=str(tmp_path / "audit")),
    )
    app = create_app(
        settings=settings,
        generator=TranslationGenerator(llm),
        token_provider=tokens[0],
    )
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(tokens):
    return tokens[1]["admin"]


@pytest.fixture
def user_headers(tokens):
    return tokens[1]["user"]


def _seed(client, headers):
    for code, name in [("en", "English"), ("fr", "French")]:
        resp = client.post("/api/admin/languages", json={"code": code, "name": name}, headers=headers)
        assert resp.status_code == 201
    resp = client.post(
        "/api/admin/translation-keys",
        json={"key_name": "nav.tasks", "category": "nav"},
        headers=headers,
    )
    assert resp.status_code == 201
    return resp.json()["id"]


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"


class TestPublicEndpoints:
    def test_languages_and_translations(self, client, admin_headers):
        key_id = _seed(client, admin_headers)
        client.put(
            f"/api/admin/translations/{key_id}/fr",
            json={"value": "Tâches"},
            headers=admin_headers,
        )

        codes = [l["code"] for l in client.get("/api/translations/languages").json()]
        assert sorted(codes) == ["en", "fr"]

        resp = client.get("/api/translations/fr")
        assert resp.json() == {"language_code": "fr", "translations": {"nav.tasks": "Tâches"}}

    def test_unknown_language_is_404(self, client):
        resp = client.get("/api/translations/zz")
        assert resp.status_code == 404
        assert resp.json()["kind"] == "not_found"

    def test_resolve_uses_fallback_chain(self, client, admin_headers):
        key_id = _seed(client, admin_headers)
        client.put(
            f"/api/admin/translations/{key_id}/fr",
            json={"value": "Tâches"},
            headers=admin_headers,
        )

        resp = client.post(
            "/api/translations/resolve",
            json={
                "language": "fr",
                "keys": ["nav.tasks", "nav.home", "nav.unknown", "nav.other"],
                "fallbacks": {"nav.unknown": "Unknown"},
            },
        )
        assert resp.json()["translations"] == {
            "nav.tasks": "Tâches",
            "nav.home": "Home",
            "nav.unknown": "Unknown",
            "nav.other": "nav.other",
        }

    def test_resolve_params_named_like_arguments(self, client):
        resp = client.post(
            "/api/translations/resolve",
            json={
                "language": "en",
                "keys": ["nav.greeting"],
                "fallbacks": {"nav.greeting": "Open {key} ({fallback})"},
                "params": {"key": "x", "fallback": "y"},
            },
        )
        assert resp.status_code == 200
        assert resp.json()["translations"] == {"nav.greeting": "Open x (y)"}


class TestAdminEndpoints:
    def test_requires_token_and_admin_role(self, client, user_headers):
        assert client.get("/api/admin/languages").status_code == 401
        resp = client.get("/api/admin/languages", headers=user_headers)
        assert resp.status_code == 403
        assert resp.json()["kind"] == "permission"

    def test_duplicate_language_conflicts(self, client, admin_headers):
        _seed(client, admin_headers)
        resp = client.post(
            "/api/admin/languages", json={"code": "fr", "name": "French"}, headers=admin_headers
        )
        assert resp.status_code == 409

    def test_update_language_and_list_all(self, client, admin_headers):
        _seed(client, admin_headers)
        languages = client.get("/api/admin/languages", headers=admin_headers).json()
        fr = next(l for l in languages if l["code"] == "fr")

        resp = client.put(
            f"/api/admin/languages/{fr['id']}", json={"is_active": False}, headers=admin_headers
        )
        assert resp.json()["is_active"] is False
        public = [l["code"] for l in client.get("/api/translations/languages").json()]
        assert public == ["en"]
        everything = client.get("/api/admin/languages", headers=admin_headers).json()
        assert len(everything) == 2

    def test_renaming_key_is_rejected(self, client, admin_headers):
        key_id = _seed(client, admin_headers)
        resp = client.put(
            f"/api/admin/translation-keys/{key_id}",
            json={"key_name": "nav.jobs"},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["kind"] == "validation"

    def test_details_grid_and_delete_key(self, client, admin_headers):
        key_id = _seed(client, admin_headers)
        client.put(
            f"/api/admin/translations/{key_id}/fr", json={"value": "Tâches"}, headers=admin_headers
        )

        grid = client.get("/api/admin/translations", headers=admin_headers).json()
        cells = {c["language_code"]: c for c in grid[0]["translations"]}
        assert cells["fr"] == {
            "language_code": "fr",
            "language_name": "French",
            "value": "Tâches",
            "translated": True,
        }
        assert cells["en"]["translated"] is False

        resp = client.delete(f"/api/admin/translation-keys/{key_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get("/api/translations/fr").json()["translations"] == {}
        resp = client.delete(f"/api/admin/translation-keys/{key_id}", headers=admin_headers)
        assert resp.status_code == 404

    def test_missing_value_is_400(self, client, admin_headers):
        key_id = _seed(client, admin_headers)
        resp = client.put(f"/api/admin/translations/{key_id}/fr", json={}, headers=admin_headers)
        assert resp.status_code == 400

    def test_export_and_import(self, client, admin_headers):
        key_id = _seed(client, admin_headers)
        client.put(
            f"/api/admin/translations/{key_id}/fr", json={"value": "Tâches"}, headers=admin_headers
        )
        exported = client.get("/api/admin/translations/export", headers=admin_headers).json()
        assert exported == {"fr": {"nav.tasks": "Tâches"}}

        client.delete(f"/api/admin/translations/{key_id}/fr", headers=admin_headers)
        payload = {**exported, "xx": {"nav.tasks": "?"}}
        resp = client.post("/api/admin/translations/import", json=payload, headers=admin_headers)

        assert resp.status_code == 200
        assert resp.json() == {"imported": 1, "errors": ["Language xx not found"]}
        assert client.get("/api/translations/fr").json()["translations"] == {"nav.tasks": "Tâches"}


class TestAIEndpoints:
    def test_generate_single(self, client, admin_headers):
        _seed(client, admin_headers)
        resp = client.post(
            "/api/ai-translations/generate",
            json={"key": "nav.tasks", "target_language": "fr"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["translation"] == "Tâches"

    def test_provider_failure_is_502(self, client, admin_headers):
        _seed(client, admin_headers)
        resp = client.post(
            "/api/ai-translations/generate",
            json={"key": "nav.tasks", "target_language": "de"},
            headers=admin_headers,
        )
        assert resp.status_code == 502
        assert "No candidate produced" in resp.json()["detail"]

    def test_bulk_then_accept(self, client, admin_headers):
        _seed(client, admin_headers)
        resp = client.post(
            "/api/ai-translations/generate-bulk",
            json={"key": "nav.tasks", "target_languages": ["fr", "es", "de"]},
            headers=admin_headers,
        )
        body = resp.json()
        assert body["translations"] == {"fr": "Tâches", "es": "Tareas"}
        assert list(body["errors"]) == ["de"]
        assert client.get("/api/translations/fr").json()["translations"] == {}

        resp = client.post(
            "/api/ai-translations/accept",
            json={"key": "nav.tasks", "language_code": "fr", "translation": "Tâches"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert client.get("/api/translations/fr").json()["translations"] == {"nav.tasks": "Tâches"}

    def test_languages_and_status(self, client, admin_headers):
        languages = client.get("/api/ai-translations/languages", headers=admin_headers).json()
        assert {"code": "he", "name": "Hebrew", "rtl": True} in languages
        status = client.get("/api/ai-translations/status", headers=admin_headers).json()
        assert status["healthy"] is True

    def test_ai_requires_admin(self, client, user_headers):
        resp = client.post(
            "/api/ai-translations/generate",
            json={"key": "nav.tasks", "target_language": "fr"},
            headers=user_headers,
        )
        assert resp.status_code == 403


class TestStaticEndpoints:
    def test_public_reads(self, client):
        assert client.get("/api/static-translations").json() == {"languages": ["en"]}
        resp = client.get("/api/static-translations/en")
        assert resp.json()["translations"] == {"nav.tasks": "Tasks", "nav.home": "Home"}
        assert client.get("/api/static-translations/fr").status_code == 404

    def test_put_creates_backup_and_next_read_is_new(self, client, admin_headers):
        new_doc = {"nav.tasks": "My Tasks", "nav.home": "Home"}
        resp = client.put("/api/static-translations/en", json=new_doc, headers=admin_headers)

        body = resp.json()
        assert body["updated_keys"] == 2
        assert body["backup_created"] is True
        assert client.get("/api/static-translations/en").json()["translations"] == new_doc

        backups = client.get("/api/static-translations/en/backups", headers=admin_headers).json()
        assert [b["name"] for b in backups] == [body["backup_name"]]

        resp = client.post(
            "/api/static-translations/en/restore",
            json={"backup_name": body["backup_name"]},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        restored = client.get("/api/static-translations/en").json()["translations"]
        assert restored["nav.tasks"] == "Tasks"

    def test_put_rejects_nested_document(self, client, admin_headers):
        resp = client.put(
            "/api/static-translations/en",
            json={"nav": {"tasks": "Tasks"}},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_put_requires_admin(self, client, user_headers):
        resp = client.put(
            "/api/static-translations/en", json={"nav.tasks": "x"}, headers=user_headers
        )
        assert resp.status_code == 403
