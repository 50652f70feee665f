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

"""Heuristic scoring of provider responses.

All scores are pure functions of the prompt, the response text, the latency
and the model identifier. They are cheap lexical heuristics, not semantic
judgements:

- confidence: 0.5 base plus bonuses for plausible length, terminal
  punctuation, fenced code for code prompts and structured layout
- weight: confidence discounted by latency and boosted per model
- tournament score: 0-100 ranking used by the tournament fusion
- cost estimate: rough USD cost of the successful responses
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .config import (
    CAPABILITY_FACTORS,
    COST_RATES,
    DEFAULT_CAPABILITY_FACTOR,
    DEFAULT_COST_RATE,
)
from .models import ProviderResult

TERMINAL_PUNCTUATION = (".", "!", "?")


def _ends_with_terminal(text: str) -> bool:
    return text.endswith(TERMINAL_PUNCTUATION)


class ScoringEngine:
    """Compute confidence, weight, tournament score and cost.

    Example:
        >>> scoring = ScoringEngine()
        >>> confidence = scoring.confidence("Say hi", "Hello there.")
        >>> scoring.weight("gpt-4", confidence, latency_ms=1000)
    """

    def __init__(
        self,
        capability_factors: Mapping[str, float] = CAPABILITY_FACTORS,
        cost_rates: Mapping[str, float] = COST_RATES,
    ) -> None:
        """Initialize scoring engine.

        Args:
            capability_factors: Per-model weight multipliers
            cost_rates: Per-model USD rate per 1K response tokens
        """
        self.capability_factors = capability_factors
        self.cost_rates = cost_rates

    def confidence(self, prompt: str, response: str) -> float:
        """Heuristic confidence in [0.5, 1.0] for one response."""
        score = 0.5

        expected_length = len(prompt) * 10
        if expected_length // 2 < len(response) < expected_length * 3:
            score += 0.1

        if _ends_with_terminal(response):
            score += 0.1

        # Case-sensitive: "Code" in the prompt does not match
        if "code" in prompt and "```" in response:
            score += 0.2

        if "\n" in response and ":" in response:
            score += 0.1

        return min(score, 1.0)

    def weight(self, model: str, confidence: float, latency_ms: int) -> float:
        """Fusion weight in [0, 1]: confidence, latency discount and model factor."""
        latency_factor = 1.0 / (1.0 + latency_ms / 1000.0)
        factor = self.capability_factors.get(model, DEFAULT_CAPABILITY_FACTOR)
        return min(confidence * latency_factor * factor, 1.0)

    def tournament_score(self, prompt: str, response: str) -> float:
        """Score in [50, 100] used to rank tournament entrants."""
        score = 50.0

        if len(response) > 50:
            score += 10.0

        prompt_words = prompt.split()
        if prompt_words:
            response_words = set(response.split())
            matches = sum(1 for word in prompt_words if word in response_words)
            score += 20.0 * matches / len(prompt_words)

        if "\n" in response:
            score += 10.0

        if _ends_with_terminal(response):
            score += 10.0

        return min(score, 100.0)

    def estimate_cost(self, results: Iterable[ProviderResult]) -> float:
        """Rough USD cost of the successful results (4 characters per token)."""
        total = 0.0
        for result in results:
            if not result.success or result.response is None:
                continue
            tokens = len(result.response) // 4
            rate = self.cost_rates.get(result.provider_name, DEFAULT_COST_RATE)
            total += tokens / 1000.0 * rate
        return total
