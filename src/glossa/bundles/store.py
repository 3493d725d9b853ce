"""Static locale bundle store: one flat JSON document per language.

Documents are the baseline/fallback text of the UI and live on disk next
to the application, independent of the relational translation store.
Every write replaces the whole document, first copying the previous
version to a timestamped backup that is never pruned, and then drops the
in-process cached copy so the next read sees the new content.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from glossa.core.config import BundleConfig
from glossa.core.errors import NotFoundError, ValidationError
from glossa.translations.validation import validate_document, validate_language_code

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class BundleWriteResult(BaseModel):
    language_code: str
    updated_keys: int
    backup_created: bool
    backup_name: str | None = None
    timestamp: datetime


class BundleBackup(BaseModel):
    name: str
    language_code: str
    size_bytes: int
    created_at: datetime


class StaticBundleStore:
    """File-backed store of static locale documents.

    Args:
        locales_dir: Directory holding ``<code>.json`` documents.
        backup_dir: Directory for backups. Defaults to ``<locales_dir>/backups``.
    """

    def __init__(
        self,
        locales_dir: str | Path,
        backup_dir: str | Path | None = None,
    ) -> None:
        self._locales_dir = Path(locales_dir)
        self._backup_dir = Path(backup_dir) if backup_dir else self._locales_dir / "backups"
        self._cache: dict[str, tuple[int, dict[str, str]]] = {}
        self._cache_lock = threading.Lock()
        self._write_locks: dict[str, threading.Lock] = {}
        self._write_locks_guard = threading.Lock()

    @classmethod
    def from_config(cls, config: BundleConfig) -> StaticBundleStore:
        return cls(config.locales_dir, config.backup_dir)

    @property
    def locales_dir(self) -> Path:
        return self._locales_dir

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    def path_for(self, language_code: str) -> Path:
        validate_language_code(language_code)
        return self._locales_dir / f"{language_code}{_SUFFIX}"

    # -- reads ---------------------------------------------------------------

    def list_languages(self) -> list[str]:
        """Language codes that have a bundle file."""
        if not self._locales_dir.exists():
            return []
        return sorted(p.stem for p in self._locales_dir.glob(f"*{_SUFFIX}") if p.is_file())

    def read(self, language_code: str) -> dict[str, str]:
        """Return the document for *language_code*.

        Raises:
            NotFoundError: No bundle file exists for the language.
            ValidationError: The file is not a flat key -> text JSON object.
        """
        path = self.path_for(language_code)
        try:
            mtime = path.stat().st_mtime_ns
        except FileNotFoundError:
            raise NotFoundError(
                f"Static translation file not found for language: {language_code}",
                code=language_code,
            ) from None

        with self._cache_lock:
            cached = self._cache.get(language_code)
            if cached is not None and cached[0] == mtime:
                return dict(cached[1])

        document = self._load(path)
        with self._cache_lock:
            self._cache[language_code] = (mtime, document)
        logger.debug("Loaded %d static translations for %s", len(document), language_code)
        return dict(document)

    def list_backups(self, language_code: str) -> list[BundleBackup]:
        validate_language_code(language_code)
        if not self._backup_dir.exists():
            return []
        backups = []
        for path in sorted(self._backup_dir.glob(f"{language_code}.*{_SUFFIX}")):
            stat = path.stat()
            backups.append(
                BundleBackup(
                    name=path.name,
                    language_code=language_code,
                    size_bytes=stat.st_size,
                    created_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return backups

    # -- writes --------------------------------------------------------------

    def write(self, language_code: str, document: Any) -> BundleWriteResult:
        """Replace the whole document for *language_code*.

        The previous file, if any, is copied to a timestamped backup before
        the new content is written; the cached copy is invalidated after.
        Only one write per language runs at a time.
        """
        path = self.path_for(language_code)
        document = validate_document(document)

        with self._write_lock(language_code):
            backup_name = self._backup(language_code, path)
            self._locales_dir.mkdir(parents=True, exist_ok=True)
            self._atomic_write(path, document)
            self.invalidate(language_code)

        logger.info(
            "Saved %d static translations for %s (backup: %s)",
            len(document), language_code, backup_name or "none",
        )
        return BundleWriteResult(
            language_code=language_code,
            updated_keys=len(document),
            backup_created=backup_name is not None,
            backup_name=backup_name,
            timestamp=datetime.now(timezone.utc),
        )

    def restore_backup(self, language_code: str, backup_name: str) -> BundleWriteResult:
        """Write a backup back as the live document (backing up the current one)."""
        validate_language_code(language_code)
        candidate = self._backup_dir / backup_name
        if (
            candidate.parent != self._backup_dir
            or not backup_name.startswith(f"{language_code}.")
            or not candidate.is_file()
        ):
            raise NotFoundError(
                f"Backup {backup_name!r} not found for language: {language_code}",
                code=language_code,
            )
        return self.write(language_code, self._load(candidate))

    def invalidate(self, language_code: str | None = None) -> None:
        """Drop cached documents (one language, or all)."""
        with self._cache_lock:
            if language_code is None:
                self._cache.clear()
            else:
                self._cache.pop(language_code, None)

    # -- internal ------------------------------------------------------------

    def _write_lock(self, language_code: str) -> threading.Lock:
        with self._write_locks_guard:
            lock = self._write_locks.get(language_code)
            if lock is None:
                lock = self._write_locks[language_code] = threading.Lock()
            return lock

    def _backup(self, language_code: str, path: Path) -> str | None:
        if not path.exists():
            return None
        self._backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        target = self._backup_dir / f"{language_code}.{stamp}{_SUFFIX}"
        counter = 1
        while target.exists():
            target = self._backup_dir / f"{language_code}.{stamp}-{counter}{_SUFFIX}"
            counter += 1
        shutil.copy2(path, target)
        return target.name

    @staticmethod
    def _atomic_write(path: Path, document: dict[str, str]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
                fh.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Failed to parse {path.name}: {exc}") from exc
        return validate_document(data)
