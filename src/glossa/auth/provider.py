"""Token provider Protocol and fixture-backed implementation."""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from glossa.auth.models import Identity, TokenValidation
from glossa.core.types import Role

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenProvider(Protocol):
    """Maps bearer tokens to identities."""

    def validate_token(self, token: str) -> TokenValidation: ...


class StaticTokenProvider:
    """Token provider seeded from a YAML fixtures file.

    The file holds a ``tokens`` list of ``{token, user_id, role}`` entries.
    Additional tokens can be issued at runtime with :meth:`issue`; they live
    only as long as the provider.
    """

    def __init__(self, fixtures_path: str | Path | None = None) -> None:
        self._tokens: dict[str, Identity] = {}
        if fixtures_path is not None:
            self._load_fixtures(Path(fixtures_path))

    def _load_fixtures(self, path: Path) -> None:
        if not path.exists():
            logger.info("No auth fixtures at %s", path)
            return
        with open(path) as fh:
            data: dict[str, Any] = yaml.safe_load(fh) or {}
        for entry in data.get("tokens", []):
            self._tokens[entry["token"]] = Identity(
                user_id=entry["user_id"],
                role=Role(entry.get("role", Role.USER)),
            )
        logger.info("Loaded %d auth tokens from %s", len(self._tokens), path)

    def issue(self, user_id: str, role: Role = Role.USER) -> str:
        token = secrets.token_urlsafe(24)
        self._tokens[token] = Identity(user_id=user_id, role=role)
        return token

    def revoke(self, token: str) -> bool:
        return self._tokens.pop(token, None) is not None

    def validate_token(self, token: str) -> TokenValidation:
        identity = self._tokens.get(token)
        if identity is None:
            return TokenValidation(valid=False)
        return TokenValidation(valid=True, identity=identity)
