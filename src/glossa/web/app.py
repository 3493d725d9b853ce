"""FastAPI application for the Glossa localization service.

Serves the public translation endpoints used by clients and the resolution
engine, the role-gated admin and AI-draft endpoints, and the static bundle
endpoints.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from glossa import __version__
from glossa.admin.service import LocalizationAdmin
from glossa.ai.generator import TranslationGenerator
from glossa.auth.middleware import AuthMiddleware
from glossa.auth.provider import StaticTokenProvider, TokenProvider
from glossa.bundles.store import StaticBundleStore
from glossa.core.config import Settings
from glossa.core.errors import LocalizationError
from glossa.core.types import ErrorKind
from glossa.db.engine import DatabaseManager
from glossa.governance.audit import AuditLogger, AuditSink
from glossa.llm.client import create_llm_client
from glossa.repositories.postgres.translations import PostgresTranslationRepository
from glossa.repositories.protocols import TranslationRepository
from glossa.web.admin_router import router as admin_router
from glossa.web.ai_router import router as ai_router
from glossa.web.static_router import router as static_router
from glossa.web.translation_router import router as translation_router

logger = logging.getLogger(__name__)

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 400,
    ErrorKind.UPSTREAM_PROVIDER: 502,
    ErrorKind.PARTIAL_BATCH: 422,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.PERMISSION: 403,
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__


async def _localization_error_handler(
    request: Request, exc: LocalizationError
) -> JSONResponse:
    status = _STATUS_BY_KIND.get(exc.kind, 400)
    if status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status,
        content={"detail": exc.message, "kind": str(exc.kind)},
    )


def create_app(
    settings: Settings | None = None,
    repository: TranslationRepository | None = None,
    bundle_store: StaticBundleStore | None = None,
    generator: TranslationGenerator | None = None,
    audit_logger: AuditSink | None = None,
    token_provider: TokenProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with substitute dependencies.

    Args:
        settings: Application settings. Defaults to Settings().
        repository: Translation store. Defaults to the SQLAlchemy repository
            on ``settings.db``; its schema is created at startup when
            ``settings.db.create_schema`` is set.
        bundle_store: Static bundle store. Defaults to ``settings.bundles``.
        generator: AI draft generator. Defaults to one on ``settings.llm``.
        audit_logger: Audit sink. Defaults to AuditLogger on ``settings.audit``.
        token_provider: Bearer token provider. Defaults to fixture tokens
            from ``settings.auth.fixtures_path``.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("glossa").setLevel(settings.log_level.upper())

    db: DatabaseManager | None = None
    if repository is None:
        db = DatabaseManager.from_config(settings.db)
        repository = PostgresTranslationRepository(db)

    if bundle_store is None:
        bundle_store = StaticBundleStore.from_config(settings.bundles)

    if generator is None:
        generator = TranslationGenerator(create_llm_client(settings.llm))

    if audit_logger is None:
        audit_logger = AuditLogger(config=settings.audit)

    if token_provider is None:
        token_provider = StaticTokenProvider(settings.auth.fixtures_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if db is not None and settings.db.create_schema:
            await db.create_schema()
        logger.info("Glossa started (%s)", settings.environment)
        try:
            yield
        finally:
            await generator.close()
            if db is not None:
                await db.close()

    app = FastAPI(
        title="Glossa",
        description="Localization service: dynamic translations, static bundles, AI drafts",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(AuthMiddleware)

    app.add_exception_handler(LocalizationError, _localization_error_handler)

    app.state.settings = settings
    app.state.db = db
    app.state.repository = repository
    app.state.bundle_store = bundle_store
    app.state.generator = generator
    app.state.audit_logger = audit_logger
    app.state.token_provider = token_provider
    app.state.admin = LocalizationAdmin(
        repository=repository,
        bundles=bundle_store,
        generator=generator,
        audit=audit_logger,
    )

    app.include_router(translation_router)
    app.include_router(static_router)
    app.include_router(admin_router)
    app.include_router(ai_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="glossa")

    return app
