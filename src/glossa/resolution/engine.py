"""Resolution engine: turns (key, active language) into displayable text.

Lookup order is fixed:

1. dynamic translation for the active language (relational store)
2. static bundle value for the active language
3. static bundle value for the default language
4. caller-supplied fallback
5. the literal key

The engine owns its language state; consumers get it injected and watch
:attr:`ResolutionEngine.revision` to know when derived text is stale.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, TypeVar

from glossa.resolution.sources import TranslationSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolutionSnapshot:
    """Immutable view of the three lookup layers for one language."""

    language: str
    dynamic: Mapping[str, str] = field(default_factory=dict)
    static: Mapping[str, str] = field(default_factory=dict)
    static_default: Mapping[str, str] = field(default_factory=dict)

    def lookup(self, key: str) -> str | None:
        for layer in (self.dynamic, self.static, self.static_default):
            value = layer.get(key)
            if value is not None:
                return value
        return None


class ResolutionEngine:
    """Client-facing translation lookup with a revision counter.

    Args:
        source: Where dynamic and static documents are loaded from.
        default_language: Language whose static bundle is the last layer.
        language: Initial active language. Defaults to *default_language*.
    """

    def __init__(
        self,
        source: TranslationSource,
        default_language: str = "en",
        language: str | None = None,
    ) -> None:
        self._source = source
        self._default_language = default_language
        self._snapshot = ResolutionSnapshot(language=language or default_language)
        self._revision = 0
        self._ticket = 0
        self._background_tasks: set[asyncio.Task[bool]] = set()

    @property
    def language(self) -> str:
        return self._snapshot.language

    @property
    def default_language(self) -> str:
        return self._default_language

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def snapshot(self) -> ResolutionSnapshot:
        return self._snapshot

    def changed_since(self, revision: int) -> bool:
        return self._revision != revision

    def resolve(self, key: str, fallback: str | None = None, /, **params: Any) -> str:
        """Resolve *key* against the current snapshot. Never raises.

        *params* are applied with :meth:`str.format`; text that does not
        format with them is returned unformatted.
        """
        value = self._snapshot.lookup(key)
        if value is None:
            if fallback is None:
                return key
            value = fallback

        if params:
            try:
                return value.format(**params)
            except Exception as exc:
                logger.debug("Could not format %s: %s", key, exc)
                return value
        return value

    t = resolve

    async def switch_language(self, language: str) -> bool:
        """Load *language* and make it active.

        Returns False when a newer switch or refresh started while this one
        was loading, in which case the stale result is discarded, or when no
        layer could be loaded at all.
        """
        return await self._load(language)

    async def refresh(self) -> bool:
        """Reload the active language from the source.

        Layers that fail to load keep their previous contents. Returns False,
        leaving the revision unchanged, when no layer could be loaded.
        """
        return await self._load(self._snapshot.language)

    def request_language(self, language: str) -> asyncio.Task[bool]:
        """Fire-and-forget :meth:`switch_language`.

        The previous snapshot keeps serving until the load completes.
        """
        task = asyncio.create_task(self.switch_language(language))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _load(self, language: str) -> bool:
        self._ticket += 1
        ticket = self._ticket

        fetches = [
            self._fetch(self._source.fetch_dynamic, language, "dynamic"),
            self._fetch(self._source.fetch_static, language, "static"),
        ]
        if language != self._default_language:
            fetches.append(
                self._fetch(self._source.fetch_static, self._default_language, "static")
            )
        layers = await asyncio.gather(*fetches)

        if ticket != self._ticket:
            logger.debug("Discarding stale translations for %s", language)
            return False
        if all(layer is None for layer in layers):
            logger.warning(
                "No translations could be loaded for %s; keeping %s (revision %d)",
                language, self._snapshot.language, self._revision,
            )
            return False

        # Failed layers keep what the previous snapshot had for the same language.
        previous = self._snapshot
        if previous.language != language:
            previous = ResolutionSnapshot(language=language)
        dynamic = layers[0] if layers[0] is not None else dict(previous.dynamic)
        static = layers[1] if layers[1] is not None else dict(previous.static)
        if len(layers) > 2:
            static_default = (
                layers[2] if layers[2] is not None else dict(self._snapshot.static_default)
            )
        else:
            static_default = static

        self._snapshot = ResolutionSnapshot(
            language=language,
            dynamic=dynamic,
            static=static,
            static_default=static_default,
        )
        self._revision += 1
        logger.debug(
            "Activated %s (revision %d): %d dynamic, %d static entries",
            language, self._revision, len(dynamic), len(static),
        )
        return True

    @staticmethod
    async def _fetch(
        loader: Callable[[str], Awaitable[dict[str, str]]],
        language: str,
        layer: str,
    ) -> dict[str, str] | None:
        try:
            return dict(await loader(language))
        except Exception as exc:
            logger.warning("Could not load %s translations for %s: %s", layer, language, exc)
            return None


class DerivedText(Generic[T]):
    """Value computed from an engine, recomputed only after its revision moves.

    Usage::

        title = DerivedText(engine, lambda e: e.resolve("nav.tasks").upper())
        title.value  # recomputed after every switch or refresh
    """

    def __init__(
        self,
        engine: ResolutionEngine,
        compute: Callable[[ResolutionEngine], T],
    ) -> None:
        self._engine = engine
        self._compute = compute
        self._seen: int | None = None
        self._value: T | None = None

    @property
    def value(self) -> T:
        if self._seen is None or self._engine.changed_since(self._seen):
            self._value = self._compute(self._engine)
            self._seen = self._engine.revision
        return self._value  # type: ignore[return-value]
