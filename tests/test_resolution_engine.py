"""Tests for the resolution engine's fallback chain and language switching."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from glossa.resolution.engine import DerivedText, ResolutionEngine
from glossa.resolution.sources import HttpSource, RepositorySource


class FakeSource:
    """In-memory source; ``gates`` lets a test hold a language's load open."""

    def __init__(self, dynamic=None, static=None):
        self.dynamic = dynamic or {}
        self.static = static or {}
        self.gates: dict[str, asyncio.Event] = {}
        self.fail_dynamic = False
        self.fail_static = False

    async def fetch_dynamic(self, language):
        gate = self.gates.get(language)
        if gate is not None:
            await gate.wait()
        if self.fail_dynamic:
            raise httpx.ConnectError("store unreachable")
        return dict(self.dynamic.get(language, {}))

    async def fetch_static(self, language):
        if self.fail_static:
            raise httpx.ConnectError("bundles unreachable")
        return dict(self.static.get(language, {}))


@pytest.fixture
def source():
    return FakeSource(
        dynamic={"fr": {"nav.tasks": "Tâches"}},
        static={
            "en": {"nav.tasks": "Tasks", "nav.home": "Home", "tasks.count": "{count} tasks"},
            "fr": {"nav.home": "Accueil"},
        },
    )


class TestFallbackChain:
    async def test_dynamic_wins(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("fr")
        assert engine.resolve("nav.tasks") == "Tâches"

    async def test_static_active_language_next(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("fr")
        assert engine.resolve("nav.home") == "Accueil"

    async def test_default_static_when_language_has_nothing(self, source):
        source.static["en"]["nav.admin"] = "Admin"
        engine = ResolutionEngine(source)
        await engine.switch_language("fr")
        assert engine.resolve("nav.admin") == "Admin"

    async def test_fallback_then_literal_key(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("fr")
        assert engine.resolve("nav.unknown", "Unknown") == "Unknown"
        assert engine.resolve("nav.unknown") == "nav.unknown"

    async def test_empty_dynamic_value_is_not_skipped(self, source):
        source.dynamic["fr"]["nav.home"] = ""
        engine = ResolutionEngine(source)
        await engine.switch_language("fr")
        assert engine.resolve("nav.home") == ""

    async def test_formatting_params(self, source):
        engine = ResolutionEngine(source)
        await engine.refresh()
        assert engine.t("tasks.count", count=3) == "3 tasks"
        assert engine.t("tasks.count", other=3) == "{count} tasks"

    async def test_unformattable_text_is_returned_as_is(self, source):
        source.static["en"]["greet"] = "Hi {user.name}"
        source.static["en"]["first"] = "Item {items[0]}"
        engine = ResolutionEngine(source)
        await engine.refresh()
        assert engine.resolve("greet", user="Bob") == "Hi {user.name}"
        assert engine.resolve("first", items=5) == "Item {items[0]}"

    async def test_params_may_share_argument_names(self, source):
        source.static["en"]["nav.open"] = "Open {key}"
        engine = ResolutionEngine(source)
        await engine.refresh()
        assert engine.resolve("nav.open", None, key="x") == "Open x"
        assert engine.resolve("nav.none", "{fallback}!", fallback="y") == "y!"

    async def test_failing_layer_degrades_instead_of_raising(self, source):
        source.fail_dynamic = True
        engine = ResolutionEngine(source)
        assert await engine.switch_language("fr") is True
        assert engine.resolve("nav.tasks") == "Tasks"

    async def test_failed_refresh_keeps_previous_snapshot(self, source):
        engine = ResolutionEngine(source)
        assert await engine.refresh() is True
        revision = engine.revision

        source.fail_dynamic = True
        source.fail_static = True
        assert await engine.refresh() is False
        assert engine.revision == revision
        assert engine.resolve("nav.tasks") == "Tasks"

    async def test_refresh_keeps_layers_that_fail_to_reload(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("fr")

        source.fail_dynamic = True
        source.static["fr"]["nav.home"] = "Page d'accueil"
        assert await engine.refresh() is True
        assert engine.resolve("nav.tasks") == "Tâches"
        assert engine.resolve("nav.home") == "Page d'accueil"

    async def test_failed_switch_keeps_current_language(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("en")
        source.fail_dynamic = True
        source.fail_static = True
        assert await engine.switch_language("fr") is False
        assert engine.language == "en"
        assert engine.resolve("nav.tasks") == "Tasks"

    def test_resolves_before_any_load(self, source):
        engine = ResolutionEngine(source)
        assert engine.resolve("nav.tasks", "Tasks") == "Tasks"
        assert engine.revision == 0


class TestSwitching:
    async def test_revision_moves_on_switch(self, source):
        engine = ResolutionEngine(source)
        seen = engine.revision
        await engine.switch_language("fr")
        assert engine.changed_since(seen)
        assert engine.language == "fr"

    async def test_stale_load_is_discarded(self, source):
        source.gates["fr"] = asyncio.Event()
        engine = ResolutionEngine(source)

        slow = asyncio.create_task(engine.switch_language("fr"))
        await asyncio.sleep(0)
        assert await engine.switch_language("en") is True

        source.gates["fr"].set()
        assert await slow is False
        assert engine.language == "en"
        assert engine.resolve("nav.tasks") == "Tasks"

    async def test_request_language_keeps_serving_previous_snapshot(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("en")
        source.gates["fr"] = asyncio.Event()

        task = engine.request_language("fr")
        await asyncio.sleep(0)
        assert engine.resolve("nav.tasks") == "Tasks"

        source.gates["fr"].set()
        assert await task is True
        assert engine.resolve("nav.tasks") == "Tâches"

    async def test_derived_text_recomputes_after_switch(self, source):
        engine = ResolutionEngine(source)
        await engine.switch_language("en")
        calls = []

        def compute(e):
            calls.append(e.revision)
            return e.resolve("nav.tasks").upper()

        title = DerivedText(engine, compute)
        assert title.value == "TASKS"
        assert title.value == "TASKS"
        assert len(calls) == 1

        await engine.switch_language("fr")
        assert title.value == "TÂCHES"
        assert len(calls) == 2


class TestRepositorySource:
    async def test_fr_scenario(self, repo, bundle_store):
        await repo.create_language("en", "English")
        await repo.create_language("fr", "French")
        key = await repo.create_translation_key("nav.tasks")
        await repo.upsert_translation(key.id, "fr", "Tâches")

        engine = ResolutionEngine(RepositorySource(repo, bundle_store))
        await engine.switch_language("fr")
        assert engine.resolve("nav.tasks") == "Tâches"
        assert engine.resolve("nav.home") == "Home"

        await repo.delete_translation(key.id, "fr")
        await engine.refresh()
        assert engine.resolve("nav.tasks") == "Tasks"

    async def test_unknown_language_falls_back_to_default(self, repo, bundle_store):
        engine = ResolutionEngine(RepositorySource(repo, bundle_store))
        assert await engine.switch_language("de") is True
        assert engine.resolve("nav.tasks") == "Tasks"


class TestHttpSource:
    async def test_reads_public_endpoints(self, httpx_mock):
        httpx_mock.add_response(
            url="http://glossa.test/api/translations/fr",
            json={"language_code": "fr", "translations": {"nav.tasks": "Tâches"}},
        )
        httpx_mock.add_response(
            url="http://glossa.test/api/static-translations/fr",
            status_code=404,
            json={"detail": "missing", "kind": "not_found"},
        )
        source = HttpSource("http://glossa.test")
        try:
            assert await source.fetch_dynamic("fr") == {"nav.tasks": "Tâches"}
            assert await source.fetch_static("fr") == {}
        finally:
            await source.close()

    def test_requires_base_url_or_client(self):
        with pytest.raises(ValueError):
            HttpSource()
