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

"""Data models for multi-provider orchestration.

This module defines the records that flow through one query:
- ProviderResult: raw outcome of one provider call
- ModelContribution: a scored successful response
- ConsensusAnalysis: agreement summary across contributions
- OrchestrationMetrics: observability record for one query
- FusedResponse: the terminal, immutable artifact returned to callers
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from .config import OrchestrationStrategy, TaskType


@dataclass(frozen=True)
class ProviderResult:
    """Result from a single provider call.

    Attributes:
        provider_name: Name of the provider
        success: Whether the call succeeded
        response: Response text (if successful)
        error: Error message (if failed)
        latency_ms: Time taken in milliseconds
        tokens_used: Tokens reported by the provider, if any
    """

    provider_name: str
    success: bool
    response: str | None = None
    error: str | None = None
    latency_ms: int = 0
    tokens_used: int | None = None


class ModelContribution(BaseModel):
    """One provider's scored response as considered by a fusion strategy."""

    model: str = Field(..., description="Provider/model identifier")
    response: str = Field(..., description="Response text")
    confidence: float = Field(..., description="Heuristic quality estimate", ge=0.0, le=1.0)
    weight: float = Field(..., description="Influence on the fused result", ge=0.0)
    latency_ms: int = Field(default=0, description="Provider latency in milliseconds", ge=0)

    model_config = ConfigDict(frozen=True)


class ConsensusAnalysis(BaseModel):
    """Agreement summary across the contributions of one query."""

    agreement_score: float = Field(default=0.0, ge=0.0, le=1.0)
    key_points: list[str] = Field(default_factory=list)
    disagreements: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class OrchestrationMetrics(BaseModel):
    """Observability record attached to each fused response."""

    total_latency_ms: int = Field(default=0, description="Slowest provider latency", ge=0)
    models_used: int = Field(default=0, description="Providers dispatched", ge=0)
    cache_hit: bool = False
    tokens_used: int = Field(default=0, description="Tokens reported by providers", ge=0)
    cost_estimate: float = Field(default=0.0, description="Estimated USD cost", ge=0.0)

    model_config = ConfigDict(frozen=True)


class FusedResponse(BaseModel):
    """Final fused answer for one query.

    Immutable once constructed; the same object is stored in the response
    cache. ``contributions`` is never empty.
    """

    content: str = Field(..., description="The final fused response")
    confidence: float = Field(..., description="Overall confidence", ge=0.0, le=1.0)
    contributions: list[ModelContribution] = Field(..., min_length=1)
    consensus: ConsensusAnalysis = Field(default_factory=ConsensusAnalysis)
    metrics: OrchestrationMetrics = Field(default_factory=OrchestrationMetrics)
    strategy: OrchestrationStrategy | None = Field(
        default=None, description="Fusion strategy that produced the content"
    )
    task_type: TaskType | None = Field(default=None, description="Prompt classification")

    model_config = ConfigDict(frozen=True)

    @property
    def winner(self) -> ModelContribution:
        """Contribution with the highest weight (first on ties)."""
        return max(self.contributions, key=lambda c: c.weight)

    def as_cache_hit(self) -> FusedResponse:
        """Copy of this response with ``metrics.cache_hit`` set."""
        metrics = self.metrics.model_copy(update={"cache_hit": True})
        return self.model_copy(update={"metrics": metrics})
