"""Basic usage example for llmchorus.

This example shows how to:
1. Setup provider clients (real or demo)
2. Create an orchestrator
3. Query with automatic and forced strategies
4. Print the fused results and statistics
5. Summarize the individual answers and optimize a prompt
"""

import asyncio
import os

from llmchorus.cli.demo import create_demo_providers
from llmchorus.llm import OpenAICompatibleProvider, RetryPolicy
from llmchorus.orchestration import (
    Orchestrator,
    OrchestrationStrategy,
    PromptOptimizer,
    contributions_to_pairs,
    generate_summary,
)


async def main() -> None:
    """Basic multi-provider orchestration example."""
    # 1. Setup providers (falls back to demo providers without an API key)
    api_key = os.getenv("LLMCHORUS_OPENAI_API_KEY")
    if api_key:
        retry = RetryPolicy(max_retries=2)
        providers = [
            OpenAICompatibleProvider(api_key=api_key, model=model, retry_policy=retry)
            for model in ("gpt-4", "gpt-4o-mini")
        ]
    else:
        print("LLMCHORUS_OPENAI_API_KEY not set, using demo providers")
        providers = create_demo_providers()

    # 2. Create orchestrator
    orchestrator = Orchestrator(providers)

    # 3. Let the prompt pick the strategy
    prompts = [
        "Implement a function that reverses a linked list",
        "Write a short poem about rain",
        "Explain the CAP theorem",
    ]
    for prompt in prompts:
        response = await orchestrator.query(prompt)
        print("\n" + "=" * 60)
        print(f"Prompt: {prompt}")
        print(f"Task: {response.task_type.value if response.task_type else '-'}")
        print(f"Strategy: {response.strategy.value if response.strategy else '-'}")
        print(f"Confidence: {response.confidence:.2f}")
        print(f"Winner: {response.winner.model}")
        print(f"\n{response.content}")

    # 4. Force a strategy for a follow-up question
    tournament = orchestrator.with_strategy(OrchestrationStrategy.TOURNAMENT)
    response = await tournament.query("Explain the CAP theorem")
    print("\n" + "=" * 60)
    print(f"Cached: {response.metrics.cache_hit}")

    # 5. Ask one model to compare the individual answers
    summary = await generate_summary(providers[0], contributions_to_pairs(response))
    print("\n" + "=" * 60)
    print(f"Summary:\n{summary}")

    # 6. Rewrite a prompt before sending it
    optimized = PromptOptimizer().optimize("Explain recursion")
    print("\n" + "=" * 60)
    print(f"Optimized prompt ({', '.join(optimized.techniques_applied)}):")
    print(optimized.optimized)

    print("\n" + orchestrator.get_stats().summary())


if __name__ == "__main__":
    asyncio.run(main())
