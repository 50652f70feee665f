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

"""
llmchorus - Multi-provider LLM orchestration

Send one prompt to several language models at once and fuse their answers
into a single scored response.
"""

__version__ = "0.1.0"

from llmchorus.llm.base import ProviderClient, ProviderReply
from llmchorus.orchestration import (
    FusedResponse,
    Orchestrator,
    OrchestrationStrategy,
    OrchestratorConfig,
    TaskType,
)

__all__ = [
    "FusedResponse",
    "Orchestrator",
    "OrchestrationStrategy",
    "OrchestratorConfig",
    "ProviderClient",
    "ProviderReply",
    "TaskType",
    "__version__",
]
