"""Authentication middleware and dependencies."""

from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from glossa.auth.models import Identity


class AuthMiddleware(BaseHTTPMiddleware):
    """Extracts the Bearer token and sets ``request.state.identity``."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.identity = None

        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]
            provider = getattr(request.app.state, "token_provider", None)
            if provider is not None:
                validation = provider.validate_token(token)
                if validation.valid:
                    request.state.identity = validation.identity

        return await call_next(request)


def get_identity(request: Request) -> Identity | None:
    """FastAPI dependency returning the caller's identity, if any.

    Authorization itself happens in the admin service so the same rules
    apply to HTTP and in-process callers.
    """
    return getattr(request.state, "identity", None)
