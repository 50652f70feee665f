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

"""Configuration models for multi-provider orchestration.

Defines the caller-selectable strategies, prompt task categories, the static
model capability registry and orchestrator tuning knobs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class OrchestrationStrategy(Enum):
    """Strategy for combining responses from multiple providers.

    Strategies:
    - PARALLEL: All models answer, first success wins, equal weights
    - SEQUENTIAL: Placeholder for refine-in-turn; runs as PARALLEL
    - SPECIALIZED: Placeholder for capability routing; runs as PARALLEL
    - CONSENSUS: Agreement-based fusion; runs as WEIGHTED_FUSION
    - WEIGHTED_FUSION: Best-weighted response, confidence-weighted average
    - TOURNAMENT: Scored ranking, winner takes all
    - ADAPTIVE: Picks one of the above from the prompt's task type
    """

    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"
    SPECIALIZED = "specialized"
    CONSENSUS = "consensus"
    WEIGHTED_FUSION = "weighted_fusion"
    TOURNAMENT = "tournament"
    ADAPTIVE = "adaptive"


class TaskType(Enum):
    """Coarse prompt category used for strategy selection."""

    CODE = "code"
    CREATIVE = "creative"
    ANALYSIS = "analysis"
    MATHEMATICS = "mathematics"
    GENERAL = "general"


class Strength(Enum):
    """Capability tags for models in the registry."""

    REASONING = "reasoning"
    CREATIVITY = "creativity"
    CODE_GENERATION = "code_generation"
    MATHEMATICS = "mathematics"
    LANGUAGE = "language"
    ANALYSIS = "analysis"
    VISION = "vision"
    SPEED = "speed"


@dataclass(frozen=True)
class ModelCapabilities:
    """Static description of a model.

    Attributes:
        name: Human-readable model name
        strengths: Capability tags
        avg_latency_ms: Typical response latency
        cost_per_1k_tokens: Approximate USD cost per 1K tokens
        max_context_length: Context window in tokens
        supports_streaming: Whether incremental output is available
        supports_vision: Whether image input is accepted
        supports_function_calling: Whether tool calls are supported
    """

    name: str
    strengths: frozenset[Strength] = frozenset()
    avg_latency_ms: int = 0
    cost_per_1k_tokens: float = 0.0
    max_context_length: int = 0
    supports_streaming: bool = False
    supports_vision: bool = False
    supports_function_calling: bool = False


DEFAULT_CAPABILITIES: Mapping[str, ModelCapabilities] = MappingProxyType(
    {
        "gpt-4": ModelCapabilities(
            name="GPT-4",
            strengths=frozenset({Strength.REASONING, Strength.CODE_GENERATION, Strength.ANALYSIS}),
            avg_latency_ms=2000,
            cost_per_1k_tokens=0.03,
            max_context_length=128000,
            supports_streaming=True,
            supports_vision=True,
            supports_function_calling=True,
        ),
        "claude-3-opus": ModelCapabilities(
            name="Claude 3 Opus",
            strengths=frozenset({Strength.CREATIVITY, Strength.LANGUAGE, Strength.ANALYSIS}),
            avg_latency_ms=2500,
            cost_per_1k_tokens=0.025,
            max_context_length=200000,
            supports_streaming=True,
            supports_vision=True,
            supports_function_calling=False,
        ),
        "gemini-1.5-pro": ModelCapabilities(
            name="Gemini 1.5 Pro",
            strengths=frozenset({Strength.SPEED, Strength.MATHEMATICS, Strength.VISION}),
            avg_latency_ms=1500,
            cost_per_1k_tokens=0.02,
            max_context_length=1000000,
            supports_streaming=False,
            supports_vision=True,
            supports_function_calling=True,
        ),
    }
)

# Weight multipliers applied on top of confidence and latency
CAPABILITY_FACTORS: Mapping[str, float] = MappingProxyType(
    {
        "gpt-4": 1.2,
        "claude-3-opus": 1.15,
        "gemini-1.5-pro": 1.1,
    }
)

# USD per 1K response tokens used for cost estimates
COST_RATES: Mapping[str, float] = MappingProxyType(
    {
        "gpt-4": 0.03,
        "claude-3-opus": 0.025,
        "gemini-1.5-pro": 0.02,
    }
)

DEFAULT_CAPABILITY_FACTOR = 1.0
DEFAULT_COST_RATE = 0.01


@dataclass
class OrchestratorConfig:
    """Configuration for the orchestrator.

    Attributes:
        default_strategy: Strategy forced on every query (None = choose by task type)
        cache_ttl_seconds: Maximum age of a cached fused response
        cache_max_entries: Maximum number of cached fused responses
        provider_timeout: Per-provider timeout in seconds (None = wait indefinitely)
        log_all_responses: Log every provider outcome at DEBUG level
        capability_factors: Per-model weight multipliers (unknown models get 1.0)
        cost_rates: Per-model USD rate per 1K response tokens
    """

    default_strategy: OrchestrationStrategy | None = None
    cache_ttl_seconds: float = 3600.0
    cache_max_entries: int = 1000
    provider_timeout: float | None = None
    log_all_responses: bool = False
    capability_factors: Mapping[str, float] = field(default_factory=lambda: CAPABILITY_FACTORS)
    cost_rates: Mapping[str, float] = field(default_factory=lambda: COST_RATES)


def parse_strategy(value: str | OrchestrationStrategy | None) -> OrchestrationStrategy | None:
    """Parse a strategy name (``weighted_fusion``, ``weighted-fusion``, ``Tournament``).

    Args:
        value: Strategy name, enum member or None

    Returns:
        Matching strategy, or None for empty input / ``auto``

    Raises:
        ValueError: If the name is unknown
    """
    if value is None or isinstance(value, OrchestrationStrategy):
        return value

    normalized = value.strip().lower().replace("-", "_")
    if normalized in ("", "auto"):
        return None
    try:
        return OrchestrationStrategy(normalized)
    except ValueError:
        valid = ", ".join(s.value for s in OrchestrationStrategy)
        raise ValueError(f"Unknown strategy '{value}'. Valid strategies: {valid}") from None
