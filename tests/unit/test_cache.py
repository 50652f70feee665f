# Copyright 2025 llmchorus contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Unit tests for the response cache."""

from __future__ import annotations

import pytest

from llmchorus.orchestration.cache import ResponseCache
from llmchorus.orchestration.models import FusedResponse, ModelContribution


class FakeClock:
    """Manually advanced time source."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_fused(content: str = "Cached answer.") -> FusedResponse:
    return FusedResponse(
        content=content,
        confidence=0.7,
        contributions=[
            ModelContribution(model="gpt-4", response=content, confidence=0.7, weight=0.84)
        ],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestResponseCache:
    """Tests for ResponseCache."""

    @pytest.mark.asyncio
    async def test_miss_on_empty(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        assert await cache.get("hello") is None

    @pytest.mark.asyncio
    async def test_hit_sets_cache_flag(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        stored = make_fused()
        await cache.set("hello", stored)

        hit = await cache.get("hello")

        assert hit is not None
        assert hit.content == "Cached answer."
        assert hit.metrics.cache_hit is True
        assert stored.metrics.cache_hit is False

    @pytest.mark.asyncio
    async def test_exact_key_match(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        await cache.set("hello", make_fused())

        assert await cache.get("Hello") is None
        assert await cache.get("hello ") is None

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self, clock: FakeClock) -> None:
        cache = ResponseCache(ttl_seconds=60, clock=clock)
        await cache.set("hello", make_fused())

        clock.advance(59)
        assert await cache.get("hello") is not None

        clock.advance(1)
        assert await cache.get("hello") is None
        assert len(cache) == 0
        assert cache.stats()["expirations"] == 1

    @pytest.mark.asyncio
    async def test_access_does_not_extend_ttl(self, clock: FakeClock) -> None:
        cache = ResponseCache(ttl_seconds=60, clock=clock)
        await cache.set("hello", make_fused())

        clock.advance(50)
        assert await cache.get("hello") is not None
        clock.advance(15)
        assert await cache.get("hello") is None

    @pytest.mark.asyncio
    async def test_lru_eviction(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_entries=2, clock=clock)
        await cache.set("a", make_fused("A."))
        await cache.set("b", make_fused("B."))

        # Touch "a" so "b" becomes least recently used
        await cache.get("a")
        await cache.set("c", make_fused("C."))

        assert len(cache) == 2
        assert await cache.get("b") is None
        assert await cache.get("a") is not None
        assert await cache.get("c") is not None
        assert cache.stats()["evictions"] == 1

    @pytest.mark.asyncio
    async def test_overwrite_does_not_evict(self, clock: FakeClock) -> None:
        cache = ResponseCache(max_entries=2, clock=clock)
        await cache.set("a", make_fused("A."))
        await cache.set("b", make_fused("B."))
        await cache.set("a", make_fused("A2."))

        assert len(cache) == 2
        hit = await cache.get("a")
        assert hit is not None and hit.content == "A2."
        assert cache.stats()["evictions"] == 0

    @pytest.mark.asyncio
    async def test_invalidate(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        await cache.set("hello", make_fused())

        assert await cache.invalidate("hello") is True
        assert await cache.invalidate("hello") is False
        assert await cache.get("hello") is None

    @pytest.mark.asyncio
    async def test_clear(self, clock: FakeClock) -> None:
        cache = ResponseCache(clock=clock)
        await cache.set("a", make_fused())
        await cache.set("b", make_fused())

        await cache.clear()

        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_stats(self, clock: FakeClock) -> None:
        cache = ResponseCache(ttl_seconds=10, max_entries=5, clock=clock)
        await cache.set("a", make_fused())
        await cache.get("a")
        await cache.get("missing")

        stats = cache.stats()

        assert stats["size"] == 1
        assert stats["max_entries"] == 5
        assert stats["ttl_seconds"] == 10
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == pytest.approx(0.5)

    @pytest.mark.parametrize(
        ("ttl", "max_entries"),
        [(0, 10), (-1, 10), (10, 0)],
    )
    def test_invalid_limits(self, ttl: float, max_entries: int) -> None:
        with pytest.raises(ValueError):
            ResponseCache(ttl_seconds=ttl, max_entries=max_entries)
