"""Identity context: who is calling and with which role."""

from glossa.auth.middleware import AuthMiddleware, get_identity
from glossa.auth.models import Identity, TokenValidation
from glossa.auth.provider import StaticTokenProvider, TokenProvider

__all__ = [
    "AuthMiddleware",
    "Identity",
    "StaticTokenProvider",
    "TokenProvider",
    "TokenValidation",
    "get_identity",
]
