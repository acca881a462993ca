from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest

from spellfix.exceptions import SettingsResolutionError
from spellfix.settings_cache import SettingsCache
from tests.fakes import FakeOracle, FakeSettingsProvider, make_document


def _cache(oracle: FakeOracle, provider: FakeSettingsProvider) -> SettingsCache:
    return SettingsCache(provider.get_settings, provider.settings_version, oracle)


def test_same_state_reuses_the_cached_task(oracle: FakeOracle) -> None:
    provider = FakeSettingsProvider()
    cache = _cache(oracle, provider)
    document = make_document("Teh cat")

    async def _run():
        first = cache.lookup(document)
        second = cache.lookup(document)
        pair = await first
        return first, second, pair, await cache.resolve(document)

    first, second, pair, again = asyncio.run(_run())
    assert first is second
    assert pair is again
    assert oracle.dictionary_builds == 1
    assert provider.calls == 1


def test_concurrent_requests_share_one_pending_build() -> None:
    async def _run():
        gate = asyncio.Event()
        oracle = FakeOracle(gate=gate)
        cache = _cache(oracle, FakeSettingsProvider())
        document = make_document("Teh cat")
        pending = [asyncio.ensure_future(cache.resolve(document)) for _ in range(2)]
        await asyncio.sleep(0)
        assert not any(task.done() for task in pending)
        gate.set()
        first, second = await asyncio.gather(*pending)
        return oracle, first, second

    oracle, first, second = asyncio.run(_run())
    assert oracle.dictionary_builds == 1
    assert first is second


def test_document_version_change_rebuilds(oracle: FakeOracle) -> None:
    cache = _cache(oracle, FakeSettingsProvider())
    document = make_document("Teh cat")

    async def _run():
        first = await cache.resolve(document)
        document.version = 2
        second = await cache.resolve(document)
        return first, second

    first, second = asyncio.run(_run())
    assert oracle.dictionary_builds == 2
    assert first is not second
    assert len(cache) == 1


def test_settings_generation_change_rebuilds(oracle: FakeOracle) -> None:
    provider = FakeSettingsProvider()
    cache = _cache(oracle, provider)
    document = make_document("Teh cat")

    async def _run():
        await cache.resolve(document)
        await cache.resolve(document)
        provider.generation += 1
        await cache.resolve(document)

    asyncio.run(_run())
    assert oracle.dictionary_builds == 2


@dataclass
class _MutableDocument:
    uri: str
    version: int
    language_id: str
    source: str

    def offset_at_position(self, position) -> int:
        return position.character


def test_text_is_captured_when_the_build_starts(oracle: FakeOracle) -> None:
    cache = _cache(oracle, FakeSettingsProvider())
    document = _MutableDocument("untitled:1", 1, "markdown", "Teh cat")

    async def _run():
        future = cache.lookup(document)
        document.source = "edited in place"
        await future

    asyncio.run(_run())
    assert oracle.constructed == [("Teh cat", "markdown")]


def test_failure_is_sticky_until_the_state_changes() -> None:
    oracle = FakeOracle(error=OSError("dictionary file missing"))
    provider = FakeSettingsProvider()
    cache = _cache(oracle, provider)
    document = make_document("Teh cat")

    async def _run():
        errors = []
        for _ in range(2):
            with pytest.raises(SettingsResolutionError) as info:
                await cache.resolve(document)
            errors.append(info.value)
        oracle.error = None
        provider.generation += 1
        pair = await cache.resolve(document)
        return errors, pair

    errors, pair = asyncio.run(_run())
    assert errors[0] is errors[1]
    assert isinstance(errors[0].__cause__, OSError)
    assert errors[0].doc_version == 1
    assert oracle.dictionary_builds == 2
    assert pair.dictionary is oracle.dictionaries[0]


def test_entries_are_per_uri_and_evictable(oracle: FakeOracle) -> None:
    cache = _cache(oracle, FakeSettingsProvider())
    first = make_document("Teh", uri="file:///work/a.txt")
    second = make_document("Teh", uri="file:///work/b.txt")

    async def _run():
        await cache.resolve(first)
        await cache.resolve(second)

    asyncio.run(_run())
    assert len(cache) == 2
    cache.evict(first.uri)
    cache.evict("file:///work/unknown.txt")
    assert first.uri not in cache
    assert second.uri in cache


def test_cancelled_caller_leaves_the_shared_build_running() -> None:
    async def _run():
        gate = asyncio.Event()
        oracle = FakeOracle(gate=gate)
        cache = _cache(oracle, FakeSettingsProvider())
        document = make_document("Teh cat")
        first = asyncio.ensure_future(cache.resolve(document))
        second = asyncio.ensure_future(cache.resolve(document))
        await asyncio.sleep(0)
        first.cancel()
        gate.set()
        outcomes = []
        for pending in (first, second, asyncio.ensure_future(cache.resolve(document))):
            try:
                await pending
            except asyncio.CancelledError:
                outcomes.append("cancelled")
            else:
                outcomes.append("ok")
        return oracle, outcomes

    oracle, outcomes = asyncio.run(_run())
    assert outcomes == ["cancelled", "ok", "ok"]
    assert oracle.dictionary_builds == 1
