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

"""Unit tests for comparative response summaries."""

from __future__ import annotations

import pytest
from conftest import MockProvider

from llmchorus.llm.base import LLMError
from llmchorus.orchestration.models import FusedResponse, ModelContribution
from llmchorus.orchestration.summary import (
    build_summary_prompt,
    contributions_to_pairs,
    generate_summary,
)


class TestBuildSummaryPrompt:
    """Tests for build_summary_prompt."""

    def test_layout(self) -> None:
        prompt = build_summary_prompt([("GPT-4", "Answer A"), ("Claude", "Answer B")])

        assert prompt == (
            "Given these AI model responses:\n"
            "GPT-4:\nAnswer A\n---\n"
            "Claude:\nAnswer B\n---\n"
            "Summarize the key differences and commonalities."
        )

    def test_no_responses(self) -> None:
        prompt = build_summary_prompt([])
        assert prompt == (
            "Given these AI model responses:\n"
            "Summarize the key differences and commonalities."
        )

    def test_multiline_responses_kept_verbatim(self) -> None:
        prompt = build_summary_prompt([("m", "line one\nline two")])
        assert "m:\nline one\nline two\n---\n" in prompt


class TestGenerateSummary:
    """Tests for generate_summary."""

    @pytest.mark.asyncio
    async def test_sends_prompt_and_returns_text(self) -> None:
        summarizer = MockProvider(name="gpt-4", response="Both agree on X.")
        responses = [("gpt-4", "X is true."), ("claude-3-opus", "X holds.")]

        summary = await generate_summary(summarizer, responses)

        assert summary == "Both agree on X."
        assert summarizer.call_count == 1
        assert summarizer.last_prompt == build_summary_prompt(responses)

    @pytest.mark.asyncio
    async def test_summarizer_error_propagates(self) -> None:
        summarizer = MockProvider(fail_with=LLMError("quota exceeded"))

        with pytest.raises(LLMError, match="quota exceeded"):
            await generate_summary(summarizer, [("a", "b")])


class TestContributionsToPairs:
    def test_contribution_order(self) -> None:
        response = FusedResponse(
            content="B.",
            confidence=0.7,
            contributions=[
                ModelContribution(model="a", response="A.", confidence=0.5, weight=0.2),
                ModelContribution(model="b", response="B.", confidence=0.7, weight=0.6),
            ],
        )

        assert contributions_to_pairs(response) == [("a", "A."), ("b", "B.")]
