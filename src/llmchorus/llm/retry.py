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

"""Retry policy applied by provider clients before surfacing an error.

Strategies:
- FIXED: same delay between every attempt
- LINEAR: delay grows by ``initial_delay`` per attempt
- EXPONENTIAL: delay doubles (``exponential_base``) per attempt
- EXPONENTIAL_JITTER: exponential delay scaled by a random 0.5x-1.5x factor
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from .base import LLMAuthenticationError, LLMError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryStrategy(Enum):
    """Backoff shape between retry attempts."""

    FIXED = "fixed"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    EXPONENTIAL_JITTER = "exponential_jitter"


@dataclass
class RetryPolicy:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        strategy: Backoff shape
        initial_delay: Base delay in seconds
        max_delay: Upper bound for any single delay
        exponential_base: Growth factor for exponential strategies
    """

    max_retries: int = 0
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL_JITTER
    initial_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2.0

    def get_delay(self, attempt: int) -> float:
        """Calculate delay after a failed attempt.

        Args:
            attempt: Attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        if self.strategy == RetryStrategy.FIXED:
            delay = self.initial_delay
        elif self.strategy == RetryStrategy.LINEAR:
            delay = self.initial_delay * (attempt + 1)
        else:
            delay = self.initial_delay * (self.exponential_base**attempt)

        delay = min(delay, self.max_delay)

        if self.strategy == RetryStrategy.EXPONENTIAL_JITTER:
            delay = delay * (0.5 + random.random())  # nosec B311 - not for crypto

        return delay

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """Authentication failures are terminal, other LLM errors are not."""
        return isinstance(error, LLMError) and not isinstance(error, LLMAuthenticationError)

    async def run(self, operation: Callable[[], Awaitable[T]], name: str = "provider") -> T:
        """Run ``operation`` until it succeeds or retries are exhausted.

        Args:
            operation: Zero-argument coroutine factory
            name: Label used in log messages

        Returns:
            The operation's result

        Raises:
            LLMError: The last error once retries are exhausted, or the first
                non-retryable error
        """
        attempts = self.max_retries + 1
        for attempt in range(attempts):
            try:
                return await operation()
            except LLMError as e:
                if not self.is_retryable(e) or attempt >= attempts - 1:
                    raise
                delay = self.get_delay(attempt)
                logger.warning(
                    f"Provider '{name}' failed (attempt {attempt + 1}/{attempts}): {e}, "
                    f"retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
        raise LLMError(f"Provider '{name}' made no attempts")
