"""Core type definitions shared across all Glossa modules."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class Role(StrEnum):
    """Roles carried by the identity context."""

    USER = "user"
    ADMIN = "admin"


class ErrorKind(StrEnum):
    """Failure taxonomy shared by single-entity and batch operations."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UPSTREAM_PROVIDER = "upstream_provider"
    PARTIAL_BATCH = "partial_batch"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"


class AuditEvent(BaseModel):
    """Audit record for one admin action."""

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    actor: str
    action: str
    resource: str
    success: bool = True
    detail: dict[str, Any] = Field(default_factory=dict)


class HealthStatus(BaseModel):
    """Health check response for any service."""

    service: str
    healthy: bool
    latency_ms: float | None = None
    details: dict[str, Any] = Field(default_factory=dict)
