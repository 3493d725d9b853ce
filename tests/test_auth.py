"""Tests for the token provider and identity middleware."""

from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from glossa.auth.middleware import AuthMiddleware, get_identity
from glossa.auth.models import Identity
from glossa.auth.provider import StaticTokenProvider, TokenProvider
from glossa.core.types import Role


def _fixtures(tmp_path):
    path = tmp_path / "auth.yml"
    path.write_text(
        "tokens:\n"
        "  - token: admin-token\n"
        "    user_id: admin@example.com\n"
        "    role: admin\n"
        "  - token: user-token\n"
        "    user_id: user@example.com\n"
    )
    return path


class TestStaticTokenProvider:
    def test_loads_fixture_tokens(self, tmp_path):
        provider = StaticTokenProvider(_fixtures(tmp_path))
        admin = provider.validate_token("admin-token")
        user = provider.validate_token("user-token")

        assert admin.valid and admin.identity.role == Role.ADMIN
        assert user.valid and user.identity.role == Role.USER
        assert provider.validate_token("nope").valid is False

    def test_missing_fixtures_file_is_empty(self, tmp_path):
        provider = StaticTokenProvider(tmp_path / "missing.yml")
        assert provider.validate_token("admin-token").valid is False

    def test_issue_and_revoke(self):
        provider = StaticTokenProvider()
        token = provider.issue("ops@example.com", Role.ADMIN)
        assert provider.validate_token(token).identity == Identity(
            user_id="ops@example.com", role=Role.ADMIN
        )
        assert provider.revoke(token) is True
        assert provider.validate_token(token).valid is False

    def test_satisfies_protocol(self):
        assert isinstance(StaticTokenProvider(), TokenProvider)


def _app(tmp_path) -> FastAPI:
    app = FastAPI()
    app.add_middleware(AuthMiddleware)
    app.state.token_provider = StaticTokenProvider(_fixtures(tmp_path))

    @app.get("/whoami")
    async def whoami(identity: Identity | None = Depends(get_identity)):
        return {"user_id": identity.user_id if identity else None}

    return app


class TestAuthMiddleware:
    def test_bearer_token_sets_identity(self, tmp_path):
        client = TestClient(_app(tmp_path))
        resp = client.get("/whoami", headers={"Authorization": "Bearer admin-token"})
        assert resp.json() == {"user_id": "admin@example.com"}

    def test_no_or_bad_token_is_anonymous(self, tmp_path):
        client = TestClient(_app(tmp_path))
        assert client.get("/whoami").json() == {"user_id": None}
        resp = client.get("/whoami", headers={"Authorization": "Bearer wrong"})
        assert resp.json() == {"user_id": None}
