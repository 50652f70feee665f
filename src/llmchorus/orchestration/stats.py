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

"""Query statistics for an orchestrator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of orchestrator statistics.

    Attributes:
        requests_total: Queries that reached the providers or the cache
        requests_successful: Queries that returned a fused response
        requests_failed: Queries that raised
        success_rate: Successful share of requests, in percent
        average_latency_ms: Mean query latency
        total_tokens_used: Tokens reported by providers
        cache_hit_rate: Cache hits share of cache lookups, in percent
    """

    requests_total: int = 0
    requests_successful: int = 0
    requests_failed: int = 0
    success_rate: float = 0.0
    average_latency_ms: int = 0
    total_tokens_used: int = 0
    cache_hit_rate: float = 0.0

    def summary(self) -> str:
        """One-line human-readable summary."""
        return (
            f"Requests: {self.requests_total} (Success: {self.success_rate:.1f}%), "
            f"Avg Latency: {self.average_latency_ms}ms, "
            f"Tokens: {self.total_tokens_used}, "
            f"Cache Hit: {self.cache_hit_rate:.1f}%"
        )


class OrchestratorStats:
    """Running counters updated once per query.

    Updates happen between awaits on the event loop thread, so no lock is
    needed.
    """

    def __init__(self) -> None:
        self.reset()

    def record_request(self, success: bool, latency_ms: int, tokens: int | None = None) -> None:
        """Record the outcome of one query."""
        self.requests_total += 1
        self.total_latency_ms += latency_ms
        if success:
            self.requests_successful += 1
        else:
            self.requests_failed += 1
        if tokens:
            self.total_tokens_used += tokens

    def record_cache_hit(self) -> None:
        self.cache_hits += 1

    def record_cache_miss(self) -> None:
        self.cache_misses += 1

    def snapshot(self) -> StatsSnapshot:
        """Current counters with derived rates."""
        total = self.requests_total
        lookups = self.cache_hits + self.cache_misses
        return StatsSnapshot(
            requests_total=total,
            requests_successful=self.requests_successful,
            requests_failed=self.requests_failed,
            success_rate=self.requests_successful / total * 100.0 if total else 0.0,
            average_latency_ms=self.total_latency_ms // total if total else 0,
            total_tokens_used=self.total_tokens_used,
            cache_hit_rate=self.cache_hits / lookups * 100.0 if lookups else 0.0,
        )

    def reset(self) -> None:
        """Reset all counters to zero."""
        self.requests_total = 0
        self.requests_successful = 0
        self.requests_failed = 0
        self.total_latency_ms = 0
        self.total_tokens_used = 0
        self.cache_hits = 0
        self.cache_misses = 0
