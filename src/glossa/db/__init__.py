"""Database layer for Glossa: SQLAlchemy 2.0 async."""

from __future__ import annotations

from glossa.db.base import Base
from glossa.db.engine import DatabaseManager

__all__ = ["Base", "DatabaseManager"]
