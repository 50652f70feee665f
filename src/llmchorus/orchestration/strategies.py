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

"""Fusion strategies that turn provider results into one fused response.

Implements the executable fusions:
- ParallelFusion: First successful response wins, equal weights
- WeightedFusion: Best-weighted response, confidence-weighted average
- TournamentFusion: Scored ranking, winner takes all
- ConsensusFusion: Agreement-based fusion (currently WeightedFusion)

Routing strategies (SEQUENTIAL, SPECIALIZED, ADAPTIVE) are resolved to one of
these by StrategySelector before fusion runs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from .config import OrchestrationStrategy
from .errors import NoSuccessfulResponsesError
from .models import (
    ConsensusAnalysis,
    FusedResponse,
    ModelContribution,
    OrchestrationMetrics,
    ProviderResult,
)
from .scoring import ScoringEngine

logger = logging.getLogger(__name__)


class BaseFusionStrategy(ABC):
    """Base class for fusion strategies.

    A fusion strategy receives every dispatched result, successes and
    failures alike, and produces a FusedResponse built from the successes.
    """

    strategy: OrchestrationStrategy

    @abstractmethod
    def fuse(
        self,
        prompt: str,
        results: Sequence[ProviderResult],
        scoring: ScoringEngine,
    ) -> FusedResponse:
        """Fuse provider results into a single response.

        Args:
            prompt: The prompt that was dispatched
            results: One result per dispatched provider
            scoring: Scoring engine for confidence and weights

        Returns:
            Fused response

        Raises:
            NoSuccessfulResponsesError: If no provider succeeded
        """
        ...

    def _successes(self, results: Sequence[ProviderResult]) -> list[ProviderResult]:
        successes = [r for r in results if r.success and r.response is not None]
        if not successes:
            failures = {r.provider_name: r.error or "unknown error" for r in results}
            raise NoSuccessfulResponsesError(failures)
        return successes

    def _build_metrics(
        self,
        results: Sequence[ProviderResult],
        scoring: ScoringEngine,
    ) -> OrchestrationMetrics:
        """Metrics over every dispatched provider, failures included."""
        return OrchestrationMetrics(
            total_latency_ms=max((r.latency_ms for r in results), default=0),
            models_used=len(results),
            cache_hit=False,
            tokens_used=sum(r.tokens_used or 0 for r in results),
            cost_estimate=scoring.estimate_cost(results),
        )

    @staticmethod
    def _mean(values: Sequence[float]) -> float:
        return sum(values) / len(values) if values else 0.0


class ParallelFusion(BaseFusionStrategy):
    """Return the first successful response in dispatch order.

    Every success is recorded as an equally weighted contribution so callers
    can still inspect the alternatives.
    """

    strategy = OrchestrationStrategy.PARALLEL

    def fuse(
        self,
        prompt: str,
        results: Sequence[ProviderResult],
        scoring: ScoringEngine,
    ) -> FusedResponse:
        successes = self._successes(results)
        share = 1.0 / len(successes)

        contributions = [
            ModelContribution(
                model=r.provider_name,
                response=r.response or "",
                confidence=scoring.confidence(prompt, r.response or ""),
                weight=share,
                latency_ms=r.latency_ms,
            )
            for r in successes
        ]
        winner = contributions[0]

        return FusedResponse(
            content=winner.response,
            confidence=winner.confidence,
            contributions=contributions,
            consensus=ConsensusAnalysis(
                agreement_score=min(self._mean([c.confidence for c in contributions]), 1.0),
                key_points=[f"First response: {winner.model}"],
            ),
            metrics=self._build_metrics(results, scoring),
            strategy=self.strategy,
        )


class WeightedFusion(BaseFusionStrategy):
    """Pick the highest-weighted response and report weighted confidence.

    Weight combines heuristic confidence, a latency discount and a per-model
    capability factor. Overall confidence is the weight-normalized mean of
    the contribution confidences.
    """

    strategy = OrchestrationStrategy.WEIGHTED_FUSION

    def fuse(
        self,
        prompt: str,
        results: Sequence[ProviderResult],
        scoring: ScoringEngine,
    ) -> FusedResponse:
        successes = self._successes(results)

        contributions: list[ModelContribution] = []
        for r in successes:
            text = r.response or ""
            confidence = scoring.confidence(prompt, text)
            contributions.append(
                ModelContribution(
                    model=r.provider_name,
                    response=text,
                    confidence=confidence,
                    weight=scoring.weight(r.provider_name, confidence, r.latency_ms),
                    latency_ms=r.latency_ms,
                )
            )

        # max() keeps the first element on ties
        best = max(contributions, key=lambda c: c.weight)

        total_weight = sum(c.weight for c in contributions)
        if total_weight > 0:
            confidence = sum(c.confidence * c.weight for c in contributions) / total_weight
        else:
            confidence = 0.0

        mean_confidence = self._mean([c.confidence for c in contributions])
        key_points = [
            f"{c.model}: confidence {c.confidence:.2f}, weight {c.weight:.2f}"
            for c in contributions
            if c.confidence >= mean_confidence
        ]
        disagreements = [
            f"{c.model}: confidence {c.confidence:.2f} below mean {mean_confidence:.2f}"
            for c in contributions
            if c.confidence < mean_confidence
        ]

        logger.debug(
            f"Weighted fusion picked '{best.model}' (weight={best.weight:.3f}, "
            f"total_weight={total_weight:.3f})"
        )

        return FusedResponse(
            content=best.response,
            confidence=min(confidence, 1.0),
            contributions=contributions,
            consensus=ConsensusAnalysis(
                agreement_score=min(mean_confidence, 1.0),
                key_points=key_points,
                disagreements=disagreements,
            ),
            metrics=self._build_metrics(results, scoring),
            strategy=self.strategy,
        )


class ConsensusFusion(WeightedFusion):
    """Agreement-based fusion.

    Shares the weighted fusion computation; only the reported strategy
    differs.
    """

    strategy = OrchestrationStrategy.CONSENSUS


class TournamentFusion(BaseFusionStrategy):
    """Rank successes by tournament score; the top scorer takes all weight.

    Ranking is a stable descending sort, so among equal scores the earlier
    result in dispatch order wins.
    """

    strategy = OrchestrationStrategy.TOURNAMENT

    def fuse(
        self,
        prompt: str,
        results: Sequence[ProviderResult],
        scoring: ScoringEngine,
    ) -> FusedResponse:
        successes = self._successes(results)

        scored = [(r, scoring.tournament_score(prompt, r.response or "")) for r in successes]
        ranked = sorted(scored, key=lambda item: item[1], reverse=True)

        contributions = [
            ModelContribution(
                model=r.provider_name,
                response=r.response or "",
                confidence=score / 100.0,
                weight=1.0 if rank == 0 else 0.0,
                latency_ms=r.latency_ms,
            )
            for rank, (r, score) in enumerate(ranked)
        ]
        winner = contributions[0]

        return FusedResponse(
            content=winner.response,
            confidence=winner.confidence,
            contributions=contributions,
            consensus=ConsensusAnalysis(
                agreement_score=0.0,
                key_points=[f"Winner: {winner.model}"],
            ),
            metrics=self._build_metrics(results, scoring),
            strategy=self.strategy,
        )


_FUSIONS: dict[OrchestrationStrategy, type[BaseFusionStrategy]] = {
    OrchestrationStrategy.PARALLEL: ParallelFusion,
    OrchestrationStrategy.WEIGHTED_FUSION: WeightedFusion,
    OrchestrationStrategy.CONSENSUS: ConsensusFusion,
    OrchestrationStrategy.TOURNAMENT: TournamentFusion,
}


def get_fusion_strategy(strategy: OrchestrationStrategy) -> BaseFusionStrategy:
    """Factory function to create a fusion strategy.

    Args:
        strategy: A resolved strategy (see StrategySelector.resolve)

    Returns:
        Fusion strategy instance

    Raises:
        ValueError: If the strategy is a routing strategy with no fusion
    """
    fusion_class = _FUSIONS.get(strategy)
    if fusion_class is None:
        raise ValueError(
            f"Strategy '{strategy.value}' has no fusion; resolve it with StrategySelector first"
        )
    return fusion_class()
