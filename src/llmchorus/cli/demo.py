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

"""Demo provider for trying the CLI without API calls."""

from __future__ import annotations

import asyncio

from llmchorus.llm import ProviderClient, ProviderReply

# Canned answers keyed by the keywords that trigger them
_DEMO_RESPONSES: dict[str, tuple[list[str], str]] = {
    "code": (
        ["code", "function", "implement"],
        """Here is a straightforward implementation:

```python
def fibonacci(n: int) -> int:
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a
```

It runs in linear time and constant memory.""",
    ),
    "creative": (
        ["creative", "story", "poem"],
        """Rain taps the window in a patient code,
each drop a syllable the clouds once owed.
The street lamps blur, the gutters start to sing,
and every puddle holds a quiet spring.""",
    ),
    "analysis": (
        ["analyze", "explain"],
        """Key points:
1. The system trades consistency for availability under partition.
2. Latency grows with the number of replicas that must agree.
3. Most real deployments pick a tunable middle ground.""",
    ),
    "math": (
        ["math", "calculate"],
        "The result is 42: multiply 6 by 7, then verify by dividing 42 by 6.",
    ),
}

_DEFAULT_RESPONSE = "This is a simulated answer from the demo provider."

# Per-model flavour so fused results differ between providers
_DEMO_MODELS: dict[str, tuple[float, str]] = {
    "gpt-4": (0.30, ""),
    "claude-3-opus": (0.45, "Thoughtfully put: "),
    "gemini-1.5-pro": (0.20, "Quick take: "),
}


def _get_demo_response(prompt_lower: str) -> str:
    """Get appropriate demo response based on prompt content."""
    for keywords, response in _DEMO_RESPONSES.values():
        if any(kw in prompt_lower for kw in keywords):
            return response
    return _DEFAULT_RESPONSE


class DemoProvider(ProviderClient):
    """Mock provider that simulates replies without making API calls.

    Used by ``llmchorus query --demo`` and in examples to show fusion without
    spending tokens.
    """

    def __init__(self, model: str = "demo-model", delay: float = 0.3, prefix: str = "") -> None:
        self.model = model
        self.delay = delay
        self.prefix = prefix

    @property
    def name(self) -> str:
        return self.model

    async def send(self, prompt: str) -> ProviderReply:
        """Simulate a completion with a canned response."""
        await asyncio.sleep(self.delay)
        text = self.prefix + _get_demo_response(prompt.lower())
        return ProviderReply(
            text=text,
            latency_ms=int(self.delay * 1000),
            tokens_used=len(prompt.split()) + len(text.split()),
        )


def create_demo_providers(delay_scale: float = 1.0) -> list[DemoProvider]:
    """One demo provider per model in the built-in capability registry.

    Args:
        delay_scale: Multiplier for simulated latency (0 for instant replies)
    """
    return [
        DemoProvider(model=model, delay=delay * delay_scale, prefix=prefix)
        for model, (delay, prefix) in _DEMO_MODELS.items()
    ]
