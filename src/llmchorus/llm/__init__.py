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

"""Provider layer for llmchorus.

Provides the abstract client interface the orchestrator consumes, the
transport error taxonomy, retry policies and a generic HTTP client.
"""

from .base import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    ProviderClient,
    ProviderReply,
)
from .openai_compatible import OpenAICompatibleProvider
from .retry import RetryPolicy, RetryStrategy

__all__ = [
    "ProviderClient",
    "ProviderReply",
    "OpenAICompatibleProvider",
    "RetryPolicy",
    "RetryStrategy",
    "LLMError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
