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

"""Multi-provider orchestration: dispatch, scoring, fusion and caching.

Key components:
- Orchestrator: Façade that turns one prompt into one fused response
- PromptClassifier / StrategySelector: Pick a strategy from the prompt
- FanOutDispatcher: Concurrent calls, failures captured as results
- ScoringEngine: Heuristic confidence, weight and tournament score
- Fusion strategies: Parallel, weighted, consensus and tournament fusion
- ResponseCache: TTL + LRU cache of fused responses
- generate_summary: Ask one model to compare several responses
- PromptOptimizer: Rule-based prompt rewriting and variations

Example:
    >>> from llmchorus.llm import OpenAICompatibleProvider
    >>> from llmchorus.orchestration import Orchestrator
    >>>
    >>> orchestrator = Orchestrator([
    ...     OpenAICompatibleProvider(api_key="sk-...", model="gpt-4"),
    ...     OpenAICompatibleProvider(api_key="sk-...", model="gpt-4o-mini"),
    ... ])
    >>> response = await orchestrator.query("Explain the CAP theorem")
    >>> print(response.content)
"""

from .cache import ResponseCache
from .classifier import PromptClassifier
from .config import (
    DEFAULT_CAPABILITIES,
    ModelCapabilities,
    OrchestrationStrategy,
    OrchestratorConfig,
    Strength,
    TaskType,
    parse_strategy,
)
from .dispatcher import FanOutDispatcher
from .errors import NoProvidersError, NoSuccessfulResponsesError, OrchestrationError
from .models import (
    ConsensusAnalysis,
    FusedResponse,
    ModelContribution,
    OrchestrationMetrics,
    ProviderResult,
)
from .orchestrator import Orchestrator
from .prompt_optimizer import (
    ExpertiseLevel,
    OptimizationContext,
    OptimizedPrompt,
    PromptOptimizer,
    PromptVariation,
    TaskCategory,
    Tone,
)
from .scoring import ScoringEngine
from .selector import StrategySelector
from .stats import OrchestratorStats, StatsSnapshot
from .strategies import (
    BaseFusionStrategy,
    ConsensusFusion,
    ParallelFusion,
    TournamentFusion,
    WeightedFusion,
    get_fusion_strategy,
)
from .summary import build_summary_prompt, contributions_to_pairs, generate_summary

__all__ = [
    # Orchestrator
    "Orchestrator",
    # Configuration
    "OrchestratorConfig",
    "OrchestrationStrategy",
    "TaskType",
    "Strength",
    "ModelCapabilities",
    "DEFAULT_CAPABILITIES",
    "parse_strategy",
    # Models
    "ProviderResult",
    "ModelContribution",
    "ConsensusAnalysis",
    "OrchestrationMetrics",
    "FusedResponse",
    # Pipeline stages
    "PromptClassifier",
    "StrategySelector",
    "FanOutDispatcher",
    "ScoringEngine",
    "ResponseCache",
    # Fusion
    "BaseFusionStrategy",
    "ParallelFusion",
    "WeightedFusion",
    "ConsensusFusion",
    "TournamentFusion",
    "get_fusion_strategy",
    # Summaries and prompt optimization
    "generate_summary",
    "build_summary_prompt",
    "contributions_to_pairs",
    "PromptOptimizer",
    "OptimizedPrompt",
    "OptimizationContext",
    "PromptVariation",
    "TaskCategory",
    "Tone",
    "ExpertiseLevel",
    # Statistics
    "OrchestratorStats",
    "StatsSnapshot",
    # Errors
    "OrchestrationError",
    "NoProvidersError",
    "NoSuccessfulResponsesError",
]
