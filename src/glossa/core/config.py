"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class DatabaseConfig(BaseSettings):
    """Relational translation store configuration."""

    model_config = {"env_prefix": "GLOSSA_DB_"}

    database_url: str = "sqlite+aiosqlite:///data/glossa.db"
    echo: bool = False
    pool_size: int = 5
    max_retries: int = 2
    retry_base_delay: float = 0.5
    create_schema: bool = True


class LLMConfig(BaseSettings):
    """Text-generation provider configuration.

    ``max_retries`` defaults to 0: AI drafts are single-shot and callers
    decide whether to try again.
    """

    model_config = {"env_prefix": "GLOSSA_LLM_"}

    provider: str = "openai"
    base_url: str = "https://api.openai.com"
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    timeout_seconds: int = 30
    max_retries: int = 0
    max_tokens: int = 200
    temperature: float = 0.3
    top_p: float | None = None


class BundleConfig(BaseSettings):
    """Static locale bundle configuration."""

    model_config = {"env_prefix": "GLOSSA_BUNDLE_"}

    locales_dir: str = "config/locales"
    backup_dir: str | None = None
    default_language: str = "en"


class AuditConfig(BaseSettings):
    """Audit logging configuration."""

    model_config = {"env_prefix": "GLOSSA_AUDIT_"}

    log_dir: str = "data/audit"


class AuthConfig(BaseSettings):
    """Identity context configuration."""

    model_config = {"env_prefix": "GLOSSA_AUTH_"}

    fixtures_path: str = "config/auth_fixtures.yml"


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "GLOSSA_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    bundles: BundleConfig = Field(default_factory=BundleConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
