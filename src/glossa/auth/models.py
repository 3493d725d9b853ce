"""Identity context models."""

from __future__ import annotations

from pydantic import BaseModel

from glossa.core.types import Role


class Identity(BaseModel):
    """Who is calling, as established by the token provider."""

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenValidation(BaseModel):
    valid: bool
    identity: Identity | None = None
