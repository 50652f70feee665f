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

"""Comparative summaries of several model responses.

A summarizer model is shown every response, labelled with the model that
produced it, and asked to describe where they agree and where they differ.
Useful next to a fused response when the individual answers matter too.

Example:
    >>> response = await orchestrator.query("Explain the CAP theorem")
    >>> summary = await generate_summary(gpt4, contributions_to_pairs(response))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..llm.base import ProviderClient
from .models import FusedResponse

logger = logging.getLogger(__name__)

SUMMARY_HEADER = "Given these AI model responses:\n"
SUMMARY_INSTRUCTION = "Summarize the key differences and commonalities."


def build_summary_prompt(responses: Iterable[tuple[str, str]]) -> str:
    """Build the summarizer prompt from ``(model, response)`` pairs.

    Each response is written as ``<model>:\\n<response>\\n---\\n`` in input
    order, followed by the closing instruction.
    """
    parts = [SUMMARY_HEADER]
    for name, text in responses:
        parts.append(f"{name}:\n{text}\n---\n")
    parts.append(SUMMARY_INSTRUCTION)
    return "".join(parts)


def contributions_to_pairs(response: FusedResponse) -> list[tuple[str, str]]:
    """``(model, response)`` pairs of a fused response, in contribution order."""
    return [(c.model, c.response) for c in response.contributions]


async def generate_summary(
    client: ProviderClient,
    responses: Sequence[tuple[str, str]],
) -> str:
    """Ask ``client`` to compare the given responses.

    Args:
        client: Provider used as the summarizer
        responses: ``(model, response)`` pairs to compare

    Returns:
        The summarizer's reply text

    Raises:
        LLMError: If the summarizer call fails
    """
    prompt = build_summary_prompt(responses)
    logger.info(f"Requesting summary of {len(responses)} responses from {client.name}")
    reply = await client.send(prompt)
    return reply.text
