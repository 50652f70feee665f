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

"""Rule-based prompt optimization.

The optimizer reads a few cheap signals from the prompt (task category,
expertise level, tone, desired length) and rewrites it with a fixed chain
of techniques:

- Clarity Enhancement: ask for a clear answer when the prompt has no
  sentence punctuation
- Context Injection: frame analysis and generation requests
- Chain of Thought: ask for step-by-step reasoning on analytical prompts
- Few-Shot Learning: invite examples unless the prompt reads as expert
- Role Specification: give the model a persona for technical, creative and
  generation tasks

It also proposes alternative phrasings of the result. Nothing here calls a
model.

Example:
    >>> result = PromptOptimizer().optimize("Explain recursion")
    >>> result.context.task_type
    <TaskCategory.ANALYSIS: 'analysis'>
    >>> print(result.optimized)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class TaskCategory(str, Enum):
    """What the prompt asks the model to do."""

    ANALYSIS = "analysis"
    GENERATION = "generation"
    SUMMARIZATION = "summarization"
    TRANSLATION = "translation"
    QUESTION_ANSWERING = "question_answering"
    REASONING = "reasoning"
    CREATIVE = "creative"
    TECHNICAL = "technical"


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    ACADEMIC = "academic"
    CREATIVE = "creative"
    TECHNICAL = "technical"
    FRIENDLY = "friendly"


class ExpertiseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


# Checked against the lowercased prompt, top to bottom
CATEGORY_KEYWORDS: tuple[tuple[TaskCategory, tuple[str, ...]], ...] = (
    (TaskCategory.ANALYSIS, ("analyze", "explain")),
    (TaskCategory.GENERATION, ("create", "generate", "write")),
    (TaskCategory.SUMMARIZATION, ("summarize", "tldr")),
    (TaskCategory.TRANSLATION, ("translate",)),
)
QUESTION_PREFIXES = ("what", "how", "why")
REASONING_KEYWORDS = ("reason", "think")

TECHNICAL_TERMS = ("algorithm", "implementation", "architecture", "optimization", "complexity")

# Case-sensitive, first match wins
TONE_KEYWORDS: tuple[tuple[Tone, tuple[str, ...]], ...] = (
    (Tone.FRIENDLY, ("please", "could you")),
    (Tone.TECHNICAL, ("technical", "detailed")),
    (Tone.ACADEMIC, ("academic", "research")),
)
LENGTH_KEYWORDS: tuple[tuple[int, tuple[str, ...]], ...] = (
    (200, ("brief", "short")),
    (1000, ("detailed", "comprehensive")),
    (300, ("concise",)),
)

BASE_CONFIDENCE = 0.7
CONFIDENCE_PER_TECHNIQUE = 0.05
MAX_CONFIDENCE = 0.95


class OptimizationContext(BaseModel):
    """Signals read from the prompt that drive the rewrite."""

    task_type: TaskCategory
    target_model: str | None = None
    desired_length: int | None = Field(default=None, description="Suggested answer length", ge=0)
    tone: Tone | None = None
    expertise_level: ExpertiseLevel = ExpertiseLevel.BEGINNER

    model_config = ConfigDict(frozen=True)


class PromptVariation(BaseModel):
    """Alternative phrasing of an optimized prompt."""

    prompt: str
    strategy: str
    expected_improvement: float = Field(..., description="Expected gain, in percent")

    model_config = ConfigDict(frozen=True)


class OptimizedPrompt(BaseModel):
    """Result of PromptOptimizer.optimize."""

    original: str
    optimized: str
    variations: list[PromptVariation] = Field(default_factory=list)
    techniques_applied: list[str] = Field(default_factory=list)
    context: OptimizationContext
    confidence: float = Field(..., ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)


class OptimizationTechnique(ABC):
    """One rewrite step in the optimization chain."""

    name: str = ""

    @abstractmethod
    def apply(self, prompt: str, context: OptimizationContext) -> str:
        """Return the rewritten prompt (or the prompt unchanged)."""
        pass


class ClarityEnhancer(OptimizationTechnique):
    name = "Clarity Enhancement"

    def apply(self, prompt: str, context: OptimizationContext) -> str:
        if "?" in prompt or "." in prompt:
            return prompt
        return f"{prompt}. Please provide a clear and detailed response."


class ContextInjector(OptimizationTechnique):
    name = "Context Injection"

    def apply(self, prompt: str, context: OptimizationContext) -> str:
        if context.task_type == TaskCategory.ANALYSIS:
            return f"Analyze the following in detail: {prompt}"
        if context.task_type == TaskCategory.GENERATION:
            return f"Generate a comprehensive response for: {prompt}"
        return prompt


class ChainOfThought(OptimizationTechnique):
    name = "Chain of Thought"

    def apply(self, prompt: str, context: OptimizationContext) -> str:
        if context.task_type in (TaskCategory.REASONING, TaskCategory.ANALYSIS):
            return f"Let's think step by step about this: {prompt}"
        return prompt


class FewShotLearning(OptimizationTechnique):
    name = "Few-Shot Learning"

    def apply(self, prompt: str, context: OptimizationContext) -> str:
        if context.expertise_level == ExpertiseLevel.EXPERT:
            return prompt
        return f"{prompt}\n\nConsider similar examples if helpful."


class RoleSpecification(OptimizationTechnique):
    name = "Role Specification"

    ROLES = {
        TaskCategory.TECHNICAL: "You are a technical expert. ",
        TaskCategory.CREATIVE: "You are a creative professional. ",
        TaskCategory.GENERATION: "You are a content creator. ",
    }

    def apply(self, prompt: str, context: OptimizationContext) -> str:
        return self.ROLES.get(context.task_type, "") + prompt


def default_techniques() -> list[OptimizationTechnique]:
    """The standard chain, in application order."""
    return [
        ClarityEnhancer(),
        ContextInjector(),
        ChainOfThought(),
        FewShotLearning(),
        RoleSpecification(),
    ]


class PromptOptimizer:
    """Rewrite prompts for better answers and suggest variations.

    Every technique in the chain is applied in order, and each one is listed
    in ``techniques_applied`` even when it leaves the prompt unchanged.
    """

    def __init__(self, techniques: list[OptimizationTechnique] | None = None) -> None:
        self.techniques = default_techniques() if techniques is None else list(techniques)

    def optimize(self, prompt: str) -> OptimizedPrompt:
        """Optimize a prompt.

        Args:
            prompt: The prompt as the user wrote it

        Returns:
            OptimizedPrompt with the rewrite, variations, techniques and context
        """
        context = self.analyze_context(prompt)

        optimized = prompt
        applied: list[str] = []
        for technique in self.techniques:
            optimized = technique.apply(optimized, context)
            applied.append(technique.name)

        logger.debug(
            f"Optimized prompt as {context.task_type.value} "
            f"({context.expertise_level.value}) with {len(applied)} techniques"
        )

        return OptimizedPrompt(
            original=prompt,
            optimized=optimized,
            variations=self.generate_variations(optimized),
            techniques_applied=applied,
            context=context,
            confidence=self.calculate_confidence(applied),
        )

    def analyze_context(self, prompt: str) -> OptimizationContext:
        return OptimizationContext(
            task_type=self.detect_task_type(prompt),
            desired_length=self.estimate_desired_length(prompt),
            tone=self.detect_tone(prompt),
            expertise_level=self.detect_expertise_level(prompt),
        )

    def detect_task_type(self, prompt: str) -> TaskCategory:
        prompt_lower = prompt.lower()
        for category, words in CATEGORY_KEYWORDS:
            if any(word in prompt_lower for word in words):
                return category
        if prompt_lower.startswith(QUESTION_PREFIXES):
            return TaskCategory.QUESTION_ANSWERING
        if any(word in prompt_lower for word in REASONING_KEYWORDS):
            return TaskCategory.REASONING
        return TaskCategory.TECHNICAL

    def detect_expertise_level(self, prompt: str) -> ExpertiseLevel:
        """Expertise grows with the number of distinct technical terms used."""
        count = sum(1 for term in TECHNICAL_TERMS if term in prompt)
        if count == 0:
            return ExpertiseLevel.BEGINNER
        if count == 1:
            return ExpertiseLevel.INTERMEDIATE
        if count == 2:
            return ExpertiseLevel.ADVANCED
        return ExpertiseLevel.EXPERT

    def detect_tone(self, prompt: str) -> Tone | None:
        for tone, words in TONE_KEYWORDS:
            if any(word in prompt for word in words):
                return tone
        return None

    def estimate_desired_length(self, prompt: str) -> int | None:
        for length, words in LENGTH_KEYWORDS:
            if any(word in prompt for word in words):
                return length
        return None

    def generate_variations(self, optimized: str) -> list[PromptVariation]:
        return [
            PromptVariation(
                prompt=f"Specifically regarding the following: {optimized}",
                strategy="Specificity Enhancement",
                expected_improvement=15.0,
            ),
            PromptVariation(
                prompt=f"{optimized}\n\nProvide concrete examples in your response.",
                strategy="Example Request",
                expected_improvement=20.0,
            ),
            PromptVariation(
                prompt=(
                    f"{optimized}\n\nStructure your response with clear sections "
                    "and bullet points where appropriate."
                ),
                strategy="Structure Enhancement",
                expected_improvement=25.0,
            ),
        ]

    @staticmethod
    def calculate_confidence(techniques: list[str]) -> float:
        return min(BASE_CONFIDENCE + CONFIDENCE_PER_TECHNIQUE * len(techniques), MAX_CONFIDENCE)
