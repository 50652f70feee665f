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

"""Shared pytest fixtures for llmchorus tests.

Provides mock provider clients, result builders and common utilities.
"""

from __future__ import annotations

import asyncio

import pytest
from typer.testing import CliRunner

from llmchorus.llm.base import LLMError, ProviderClient, ProviderReply
from llmchorus.orchestration.models import ProviderResult

# ============================================================================
# Mock Provider Fixtures
# ============================================================================


class MockProvider(ProviderClient):
    """Mock provider client for testing without real API calls."""

    def __init__(
        self,
        name: str = "mock-model",
        response: str = "Mock response.",
        delay: float = 0.0,
        latency_ms: int = 0,
        tokens_used: int | None = None,
        fail_with: Exception | None = None,
    ):
        """Initialize mock provider.

        Args:
            name: Model identifier reported by the client
            response: Text returned by ``send``
            delay: Real seconds to sleep before answering
            latency_ms: Latency reported in the reply
            tokens_used: Token usage reported in the reply
            fail_with: Exception raised instead of answering
        """
        self._name = name
        self.response = response
        self.delay = delay
        self.latency_ms = latency_ms
        self.tokens_used = tokens_used
        self.fail_with = fail_with
        self.call_count = 0
        self.last_prompt: str | None = None
        self.cancelled = False

    @property
    def name(self) -> str:
        return self._name

    async def send(self, prompt: str) -> ProviderReply:
        self.call_count += 1
        self.last_prompt = prompt
        if self.delay > 0:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.fail_with is not None:
            raise self.fail_with
        return ProviderReply(
            text=self.response, latency_ms=self.latency_ms, tokens_used=self.tokens_used
        )


@pytest.fixture
def mock_provider_class() -> type[MockProvider]:
    """Provide MockProvider class for tests that need custom instances.

    Example:
        def test_with_failure(mock_provider_class):
            provider = mock_provider_class(fail_with=LLMError("boom"))
    """
    return MockProvider


@pytest.fixture
def three_providers() -> list[MockProvider]:
    """Three healthy providers named after the built-in registry models."""
    return [
        MockProvider(name="gpt-4", response="Answer from GPT-4.", latency_ms=200, tokens_used=30),
        MockProvider(
            name="claude-3-opus", response="Answer from Claude.", latency_ms=300, tokens_used=20
        ),
        MockProvider(
            name="gemini-1.5-pro", response="Answer from Gemini.", latency_ms=100, tokens_used=10
        ),
    ]


@pytest.fixture
def failing_provider() -> MockProvider:
    """Provider that always raises an LLMError."""
    return MockProvider(name="broken-model", fail_with=LLMError("service unavailable"))


def make_result(
    name: str,
    response: str | None = "Some answer.",
    latency_ms: int = 0,
    tokens_used: int | None = None,
    error: str | None = None,
) -> ProviderResult:
    """Build a ProviderResult; a None response makes a failure."""
    if response is None:
        return ProviderResult(
            provider_name=name,
            success=False,
            error=error or "failed",
            latency_ms=latency_ms,
        )
    return ProviderResult(
        provider_name=name,
        success=True,
        response=response,
        latency_ms=latency_ms,
        tokens_used=tokens_used,
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide Typer CLI test runner."""
    return CliRunner()


# ============================================================================
# Pytest Configuration Hooks
# ============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Modify test collection to auto-mark tests based on location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
