"""Audit sink for admin actions on translation content.

The default sink appends hash-chained JSONL entries: each entry's SHA-256
covers the previous entry's hash, so editing any line breaks the chain
for every later line.
"""

from __future__ import annotations

import hashlib
import json
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from glossa.core.config import AuditConfig
from glossa.core.types import AuditEvent

_GENESIS = hashlib.sha256(b"glossa-genesis").hexdigest()


@runtime_checkable
class AuditSink(Protocol):
    """Accepts (actor, action, resource, success, detail) records."""

    def log(self, event: AuditEvent) -> None: ...


class AuditLogger:
    """Append-only, hash-chained audit log.

    Args:
        config: AuditConfig instance. Defaults to AuditConfig() which reads
            from environment variables.
        log_file: Override the log file name (default: ``audit.jsonl``).
    """

    def __init__(
        self,
        config: AuditConfig | None = None,
        log_file: str = "audit.jsonl",
    ) -> None:
        self._config = config or AuditConfig()
        self._log_dir = Path(self._config.log_dir)
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._log_path = self._log_dir / log_file
        self._lock = threading.Lock()
        self._last_hash = _GENESIS
        if self._log_path.exists():
            for data in self._entries():
                self._last_hash = data["entry_hash"]

    @staticmethod
    def _compute_hash(previous_hash: str, entry_json: str) -> str:
        return hashlib.sha256((previous_hash + entry_json).encode("utf-8")).hexdigest()

    def log(self, event: AuditEvent) -> None:
        with self._lock:
            event_json = event.model_dump_json()
            entry_hash = self._compute_hash(self._last_hash, event_json)
            line = {
                "previous_hash": self._last_hash,
                "entry_hash": entry_hash,
                "event": json.loads(event_json),
            }
            with open(self._log_path, "a", encoding="utf-8") as fh:
                fh.write(json.dumps(line, ensure_ascii=False) + "\n")
            self._last_hash = entry_hash

    def verify_chain(self) -> bool:
        """Recompute every hash; False if any entry was altered or reordered."""
        previous_hash = _GENESIS
        for data in self._entries():
            if data["previous_hash"] != previous_hash:
                return False
            event_json = AuditEvent(**data["event"]).model_dump_json()
            if data["entry_hash"] != self._compute_hash(previous_hash, event_json):
                return False
            previous_hash = data["entry_hash"]
        return True

    def query(self, filters: dict[str, Any] | None = None) -> list[AuditEvent]:
        """Events matching exact ``actor``/``action``/``resource``/``success`` filters."""
        filters = filters or {}
        results = []
        for data in self._entries():
            event = AuditEvent(**data["event"])
            if all(getattr(event, name) == value for name, value in filters.items()):
                results.append(event)
        return results

    @property
    def log_path(self) -> Path:
        return self._log_path

    def _entries(self) -> list[dict[str, Any]]:
        if not self._log_path.exists():
            return []
        with open(self._log_path, encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]
