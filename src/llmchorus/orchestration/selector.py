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

"""Strategy selection from prompt task type.

Two steps:
1. ``select`` picks a caller-facing strategy (override wins, else by task type)
2. ``resolve`` maps routing strategies (SEQUENTIAL, SPECIALIZED, ADAPTIVE)
   onto the fusion that actually runs
"""

from __future__ import annotations

import logging

from .config import OrchestrationStrategy, TaskType

logger = logging.getLogger(__name__)

TASK_STRATEGIES: dict[TaskType, OrchestrationStrategy] = {
    TaskType.CODE: OrchestrationStrategy.SPECIALIZED,
    TaskType.CREATIVE: OrchestrationStrategy.TOURNAMENT,
    TaskType.ANALYSIS: OrchestrationStrategy.WEIGHTED_FUSION,
    TaskType.MATHEMATICS: OrchestrationStrategy.CONSENSUS,
    TaskType.GENERAL: OrchestrationStrategy.ADAPTIVE,
}

# Routing strategies without their own fusion run as one of these
FUSION_FALLBACKS: dict[OrchestrationStrategy, OrchestrationStrategy] = {
    OrchestrationStrategy.SEQUENTIAL: OrchestrationStrategy.PARALLEL,
    OrchestrationStrategy.SPECIALIZED: OrchestrationStrategy.PARALLEL,
}


class StrategySelector:
    """Select and resolve orchestration strategies."""

    def select(
        self,
        task_type: TaskType,
        override: OrchestrationStrategy | None = None,
    ) -> OrchestrationStrategy:
        """Pick the strategy for a task type.

        Args:
            task_type: Prompt classification
            override: Caller-supplied strategy, returned unchanged if set

        Returns:
            Selected strategy
        """
        if override is not None:
            return override
        return TASK_STRATEGIES[task_type]

    def resolve(
        self,
        strategy: OrchestrationStrategy,
        task_type: TaskType,
    ) -> OrchestrationStrategy:
        """Map a strategy to the fusion that executes it.

        ADAPTIVE is expanded exactly once: CODE goes to SPECIALIZED, CREATIVE to
        TOURNAMENT and everything else to WEIGHTED_FUSION.

        Returns:
            One of PARALLEL, WEIGHTED_FUSION, CONSENSUS or TOURNAMENT
        """
        if strategy == OrchestrationStrategy.ADAPTIVE:
            if task_type == TaskType.CODE:
                strategy = OrchestrationStrategy.SPECIALIZED
            elif task_type == TaskType.CREATIVE:
                strategy = OrchestrationStrategy.TOURNAMENT
            else:
                strategy = OrchestrationStrategy.WEIGHTED_FUSION
            logger.debug(f"Adaptive strategy for {task_type.value} prompt: {strategy.value}")

        # TODO: route SPECIALIZED to models whose capability strengths match the task type
        return FUSION_FALLBACKS.get(strategy, strategy)
