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

"""Base abstract class for provider clients.

Defines the capability every backend must offer to the orchestrator:
given a prompt, return text, latency and optional token usage, or fail
with an ``LLMError``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderReply:
    """Successful reply from a single provider call.

    Attributes:
        text: The generated text
        latency_ms: Wall-clock time the provider spent on the call
        tokens_used: Tokens reported by the backend, if any
    """

    text: str
    latency_ms: int = 0
    tokens_used: int | None = None


class ProviderClient(ABC):
    """Abstract base class for provider clients.

    Any object implementing ``send`` and exposing ``name`` can take part in
    orchestration. ``name`` doubles as the model identifier used to look up
    static capabilities and scoring multipliers.

    Example:
        >>> client = OpenAICompatibleProvider(api_key="sk-...", model="gpt-4")
        >>> reply = await client.send("Explain monads")
        >>> print(reply.text)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Model identifier of this client (e.g. ``gpt-4``)."""

    @abstractmethod
    async def send(self, prompt: str) -> ProviderReply:
        """Send a prompt and return the reply.

        Args:
            prompt: The prompt to send

        Returns:
            ProviderReply with text, latency and token usage

        Raises:
            LLMError: If the call fails after any internal retries
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class LLMError(Exception):
    """Base exception for provider transport and API errors."""

    pass


class LLMTimeoutError(LLMError):
    """Raised when a provider request times out."""

    pass


class LLMRateLimitError(LLMError):
    """Raised when hitting provider rate limits."""

    pass


class LLMAuthenticationError(LLMError):
    """Raised when authentication fails."""

    pass
