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

"""Provider client for OpenAI-compatible chat completion endpoints.

Works with any server that speaks the ``/chat/completions`` protocol
(OpenAI, OpenRouter, vLLM, Ollama's compatibility layer and similar).
"""

from __future__ import annotations

import time
from typing import Any

import aiohttp

from .base import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    ProviderClient,
    ProviderReply,
)
from .retry import RetryPolicy


class OpenAICompatibleProvider(ProviderClient):
    """Chat completion client over aiohttp.

    Example:
        >>> provider = OpenAICompatibleProvider(
        ...     api_key="sk-...",
        ...     model="gpt-4",
        ... )
        >>> reply = await provider.send("Explain recursion")
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        temperature: float | None = None,
        max_tokens: int | None = 1024,
        retry_policy: RetryPolicy | None = None,
    ):
        """Initialize provider.

        Args:
            api_key: Bearer token for the endpoint
            model: Model name, also used as the client name
            base_url: API root (defaults to OpenAI)
            timeout: Request timeout in seconds
            temperature: Sampling temperature (omitted from payload if None)
            max_tokens: Maximum tokens to generate (omitted if None)
            retry_policy: Retry behavior for transient failures
        """
        self.api_key = api_key
        self.model = model
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.retry_policy = retry_policy or RetryPolicy()

    @property
    def name(self) -> str:
        return self.model

    async def _check_response_status(self, response: aiohttp.ClientResponse) -> None:
        """Check HTTP response status and raise appropriate exceptions.

        Raises:
            LLMAuthenticationError: If status is 401 or 403
            LLMRateLimitError: If status is 429
            LLMError: For other non-200 status codes
        """
        if response.status in (401, 403):
            raise LLMAuthenticationError(f"{self.model}: authentication failed")
        if response.status == 429:
            raise LLMRateLimitError(f"{self.model}: rate limit exceeded")
        if response.status != 200:
            error_text = await response.text()
            raise LLMError(f"{self.model}: API error (status {response.status}): {error_text}")

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        return payload

    @staticmethod
    def _extract_reply(result: dict[str, Any]) -> tuple[str | None, int | None]:
        """Pull message text and total token usage out of a response body."""
        choices = result.get("choices") or []
        text = None
        if choices:
            message = choices[0].get("message") or {}
            content = message.get("content")
            text = str(content) if content is not None else None
        usage = result.get("usage") or {}
        tokens = usage.get("total_tokens")
        return text, int(tokens) if tokens is not None else None

    async def _send_once(self, prompt: str) -> tuple[str, int | None]:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with (
                aiohttp.ClientSession(timeout=self.timeout) as session,
                session.post(url, headers=headers, json=self._build_payload(prompt)) as response,
            ):
                await self._check_response_status(response)
                result = await response.json()
        except TimeoutError as e:
            raise LLMTimeoutError(f"{self.model}: request timed out") from e
        except aiohttp.ClientError as e:
            raise LLMError(f"{self.model}: request failed: {e}") from e

        text, tokens = self._extract_reply(result)
        if text is None:
            raise LLMError(f"{self.model}: unexpected response format: {result}")
        return text, tokens

    async def send(self, prompt: str) -> ProviderReply:
        """Send a prompt, retrying transient failures per the retry policy.

        Raises:
            LLMAuthenticationError: If the API key is rejected
            LLMRateLimitError: If rate limited on the final attempt
            LLMTimeoutError: If the final attempt times out
            LLMError: For other API errors
        """
        start = time.monotonic()
        text, tokens = await self.retry_policy.run(lambda: self._send_once(prompt), self.model)
        latency_ms = int((time.monotonic() - start) * 1000)
        return ProviderReply(text=text, latency_ms=latency_ms, tokens_used=tokens)
