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

"""Fan-out dispatch of one prompt to every provider.

All providers are called concurrently with ``asyncio.gather``. Every call is
timed on its own and every outcome is collected: a provider that raises or
times out yields a failed ProviderResult, never an exception out of
``dispatch``. Cancelling the caller cancels the pending provider tasks.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from ..llm.base import ProviderClient
from .models import ProviderResult

logger = logging.getLogger(__name__)


class FanOutDispatcher:
    """Concurrent dispatcher for provider clients.

    Example:
        >>> dispatcher = FanOutDispatcher(timeout=30.0)
        >>> results = await dispatcher.dispatch([gpt4, claude], "Explain TCP")
        >>> [r.success for r in results]
        [True, False]
    """

    def __init__(self, timeout: float | None = None, log_all_responses: bool = False) -> None:
        """Initialize dispatcher.

        Args:
            timeout: Per-provider timeout in seconds (None = no limit)
            log_all_responses: Log each outcome at DEBUG level
        """
        self.timeout = timeout
        self.log_all_responses = log_all_responses

    async def _call(self, provider: ProviderClient, prompt: str) -> ProviderResult:
        name = provider.name
        start = time.monotonic()
        try:
            if self.timeout is not None:
                reply = await asyncio.wait_for(provider.send(prompt), timeout=self.timeout)
            else:
                reply = await provider.send(prompt)
        except Exception as e:
            error = str(e) or type(e).__name__
            # Without a configured timeout, a TimeoutError is the provider's own failure
            if isinstance(e, TimeoutError) and self.timeout is not None:
                error = f"Timed out after {self.timeout:.1f}s"
                if str(e):
                    error = f"{error} ({e})"
            return ProviderResult(
                provider_name=name,
                success=False,
                error=error,
                latency_ms=int((time.monotonic() - start) * 1000),
            )

        measured_ms = int((time.monotonic() - start) * 1000)
        return ProviderResult(
            provider_name=name,
            success=True,
            response=reply.text,
            latency_ms=reply.latency_ms or measured_ms,
            tokens_used=reply.tokens_used,
        )

    async def dispatch(
        self,
        providers: Sequence[ProviderClient],
        prompt: str,
    ) -> list[ProviderResult]:
        """Send ``prompt`` to all providers concurrently and wait for all of them.

        Args:
            providers: Provider clients to call
            prompt: Prompt to send

        Returns:
            Exactly one ProviderResult per provider
        """
        if not providers:
            return []

        logger.info(f"Dispatching prompt to {len(providers)} providers")

        start = time.monotonic()
        tasks = [self._call(p, prompt) for p in providers]
        raw_results = await asyncio.gather(*tasks, return_exceptions=True)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        results: list[ProviderResult] = []
        for provider, r in zip(providers, raw_results, strict=True):
            if isinstance(r, ProviderResult):
                results.append(r)
            elif isinstance(r, BaseException):
                # Cancellation and interpreter exits are not provider failures
                if not isinstance(r, Exception):
                    raise r
                results.append(
                    ProviderResult(
                        provider_name=provider.name,
                        success=False,
                        error=str(r) or type(r).__name__,
                        latency_ms=elapsed_ms,
                    )
                )

        if self.log_all_responses:
            for r in results:
                logger.debug(
                    f"Provider '{r.provider_name}': success={r.success}, latency={r.latency_ms}ms"
                )

        failed = [r.provider_name for r in results if not r.success]
        if failed:
            logger.warning(f"{len(failed)} of {len(results)} providers failed: {failed}")

        return results
