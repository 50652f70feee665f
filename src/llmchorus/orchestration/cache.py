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

"""In-memory response cache with TTL and LRU eviction.

Keys are the exact prompt text. Values are immutable FusedResponse objects,
so a hit can hand out a copy flagged as a cache hit without touching the
stored entry. Entries expire a fixed time after insertion regardless of
access; when the cache is full the least recently used entry is evicted.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .models import FusedResponse

logger = logging.getLogger(__name__)


@dataclass
class _CacheEntry:
    response: FusedResponse
    expires_at: float


class ResponseCache:
    """Async-safe TTL + LRU cache of fused responses.

    Example:
        >>> cache = ResponseCache(ttl_seconds=600, max_entries=100)
        >>> await cache.set("Explain TCP", fused)
        >>> hit = await cache.get("Explain TCP")
        >>> hit.metrics.cache_hit
        True
    """

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            ttl_seconds: Time-to-live of each entry
            max_entries: Maximum number of entries kept
            clock: Monotonic time source in seconds
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    async def get(self, prompt: str) -> FusedResponse | None:
        """Get a cached response flagged as a cache hit, or None."""
        async with self._lock:
            entry = self._entries.get(prompt)
            if entry is None:
                self._misses += 1
                return None

            if self._clock() >= entry.expires_at:
                del self._entries[prompt]
                self._expirations += 1
                self._misses += 1
                logger.debug(f"Cache entry expired: {prompt[:32]!r}")
                return None

            self._entries.move_to_end(prompt)
            self._hits += 1

        logger.debug(f"Cache hit: {prompt[:32]!r}")
        return entry.response.as_cache_hit()

    async def set(self, prompt: str, response: FusedResponse) -> None:
        """Store a response; replaces any existing entry for the prompt."""
        async with self._lock:
            if prompt in self._entries:
                del self._entries[prompt]
            elif len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(f"Evicted least recently used entry: {evicted[:32]!r}")

            self._entries[prompt] = _CacheEntry(
                response=response,
                expires_at=self._clock() + self.ttl_seconds,
            )

    async def invalidate(self, prompt: str) -> bool:
        """Remove one entry. Returns True if it was present."""
        async with self._lock:
            removed = self._entries.pop(prompt, None) is not None
        if removed:
            logger.info(f"Invalidated cache entry: {prompt[:32]!r}")
        return removed

    async def clear(self) -> None:
        """Remove all entries."""
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {count} cache entries")

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        lookups = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / lookups if lookups else 0.0,
            "evictions": self._evictions,
            "expirations": self._expirations,
        }
