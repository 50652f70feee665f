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

"""Orchestrator: one prompt in, one fused response out.

Pipeline for each query:
1. Cache lookup by exact prompt
2. Classify the prompt and pick a strategy (override or by task type)
3. Fan the prompt out to every provider concurrently
4. Fuse the successful responses with the resolved strategy
5. Cache the fused response and record statistics

Example:
    >>> orchestrator = Orchestrator([gpt4, claude, gemini])
    >>> response = await orchestrator.query("Explain quantum computing")
    >>> print(response.content, response.confidence)
    >>>
    >>> # Force a strategy; providers, registry and cache are shared
    >>> tournament = orchestrator.with_strategy("tournament")
    >>> response = await tournament.query("Write a poem about rain")
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from ..llm.base import ProviderClient
from .cache import ResponseCache
from .classifier import PromptClassifier
from .config import (
    DEFAULT_CAPABILITIES,
    ModelCapabilities,
    OrchestrationStrategy,
    OrchestratorConfig,
    parse_strategy,
)
from .dispatcher import FanOutDispatcher
from .errors import NoProvidersError, OrchestrationError
from .models import FusedResponse
from .scoring import ScoringEngine
from .selector import StrategySelector
from .stats import OrchestratorStats, StatsSnapshot
from .strategies import get_fusion_strategy

logger = logging.getLogger(__name__)


class Orchestrator:
    """Query several providers at once and fuse their answers.

    Providers and the capability registry are fixed at construction. The
    response cache and statistics may be shared between orchestrators
    created with ``with_strategy``.
    """

    def __init__(
        self,
        providers: Sequence[ProviderClient],
        config: OrchestratorConfig | None = None,
        capabilities: Mapping[str, ModelCapabilities] | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            providers: Provider clients to dispatch to (may be empty; queries
                then raise NoProvidersError)
            config: Orchestrator configuration (uses defaults if None)
            capabilities: Model capability registry (uses built-in registry if None)
            cache: Response cache (created from config if None)
        """
        self.config = config or OrchestratorConfig()
        self._providers: tuple[ProviderClient, ...] = tuple(providers)
        self._capabilities: Mapping[str, ModelCapabilities] = MappingProxyType(
            dict(DEFAULT_CAPABILITIES if capabilities is None else capabilities)
        )
        if cache is None:
            cache = ResponseCache(
                ttl_seconds=self.config.cache_ttl_seconds,
                max_entries=self.config.cache_max_entries,
            )
        self._cache = cache
        self._strategy_override: OrchestrationStrategy | None = self.config.default_strategy
        self._stats = OrchestratorStats()

        self._classifier = PromptClassifier()
        self._selector = StrategySelector()
        self._scoring = ScoringEngine(
            capability_factors=self.config.capability_factors,
            cost_rates=self.config.cost_rates,
        )
        self._dispatcher = FanOutDispatcher(
            timeout=self.config.provider_timeout,
            log_all_responses=self.config.log_all_responses,
        )

        logger.info(
            f"Orchestrator initialized with {len(self._providers)} providers: "
            f"{[p.name for p in self._providers]}"
        )

    @property
    def providers(self) -> tuple[ProviderClient, ...]:
        return self._providers

    @property
    def capabilities(self) -> Mapping[str, ModelCapabilities]:
        """Read-only model capability registry."""
        return self._capabilities

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def strategy(self) -> OrchestrationStrategy | None:
        """Forced strategy, or None when chosen per prompt."""
        return self._strategy_override

    def with_strategy(self, strategy: OrchestrationStrategy | str) -> Orchestrator:
        """Return an orchestrator that always uses ``strategy``.

        The new orchestrator shares providers, capability registry, cache and
        statistics with this one.

        Raises:
            ValueError: If ``strategy`` is an unknown name
        """
        forced = parse_strategy(strategy)
        clone = copy.copy(self)
        clone._strategy_override = forced
        logger.debug(f"Derived orchestrator with strategy: {forced.value}")
        return clone

    async def query(self, prompt: str) -> FusedResponse:
        """Answer ``prompt`` by querying every provider and fusing the results.

        Args:
            prompt: Prompt text (also the cache key)

        Returns:
            Fused response; ``metrics.cache_hit`` is True when served from cache

        Raises:
            NoProvidersError: If no providers are configured
            NoSuccessfulResponsesError: If every provider failed
        """
        if not self._providers:
            raise NoProvidersError()

        start = time.monotonic()

        cached = await self._cache.get(prompt)
        if cached is not None:
            self._stats.record_cache_hit()
            self._stats.record_request(True, int((time.monotonic() - start) * 1000))
            logger.info("Serving response from cache")
            return cached
        self._stats.record_cache_miss()

        task_type = self._classifier.classify(prompt)
        selected = self._selector.select(task_type, self._strategy_override)
        resolved = self._selector.resolve(selected, task_type)
        logger.info(
            f"Task type: {task_type.value}, strategy: {selected.value} (runs as {resolved.value})"
        )

        results = await self._dispatcher.dispatch(self._providers, prompt)

        try:
            fused = get_fusion_strategy(resolved).fuse(prompt, results, self._scoring)
        except OrchestrationError as e:
            self._stats.record_request(False, int((time.monotonic() - start) * 1000))
            logger.error(f"Query failed: {e}")
            raise

        fused = fused.model_copy(update={"task_type": task_type})
        await self._cache.set(prompt, fused)

        latency_ms = int((time.monotonic() - start) * 1000)
        self._stats.record_request(True, latency_ms, fused.metrics.tokens_used)
        logger.info(
            f"Fused {len(fused.contributions)}/{len(results)} responses "
            f"(confidence={fused.confidence:.2f}, latency={latency_ms}ms)"
        )
        return fused

    def get_stats(self) -> StatsSnapshot:
        """Snapshot of query statistics."""
        return self._stats.snapshot()

    def reset_stats(self) -> None:
        self._stats.reset()

    def get_status(self) -> dict[str, Any]:
        """Get detailed status of the orchestrator.

        Returns:
            Dictionary with configuration, providers, cache and statistics
        """
        providers_status: dict[str, Any] = {}
        for provider in self._providers:
            capabilities = self._capabilities.get(provider.name)
            providers_status[provider.name] = {
                "known_model": capabilities is not None,
                "strengths": sorted(s.value for s in capabilities.strengths)
                if capabilities
                else [],
                "avg_latency_ms": capabilities.avg_latency_ms if capabilities else None,
            }

        return {
            "config": {
                "strategy": self._strategy_override.value if self._strategy_override else "auto",
                "provider_timeout": self.config.provider_timeout,
                "cache_ttl_seconds": self._cache.ttl_seconds,
                "cache_max_entries": self._cache.max_entries,
            },
            "providers": providers_status,
            "cache": self._cache.stats(),
            "stats": self.get_stats().summary(),
        }
