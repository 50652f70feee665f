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

"""Lexical prompt classification.

Maps a prompt to a coarse task category with case-insensitive substring
checks. Categories are evaluated in a fixed priority order, so a prompt that
mentions both "code" and "poem" is always CODE.
"""

from __future__ import annotations

from .config import TaskType

# Evaluated top to bottom; first match wins
CATEGORY_KEYWORDS: tuple[tuple[TaskType, tuple[str, ...]], ...] = (
    (TaskType.CODE, ("code", "function", "implement")),
    (TaskType.CREATIVE, ("creative", "story", "poem")),
    (TaskType.ANALYSIS, ("analyze", "explain")),
    (TaskType.MATHEMATICS, ("math", "calculate")),
)


class PromptClassifier:
    """Classify prompts into task categories.

    Example:
        >>> PromptClassifier().classify("Write creative code for a poem")
        <TaskType.CODE: 'code'>
    """

    def __init__(
        self,
        keywords: tuple[tuple[TaskType, tuple[str, ...]], ...] = CATEGORY_KEYWORDS,
    ) -> None:
        self.keywords = keywords

    def classify(self, prompt: str) -> TaskType:
        """Return the highest-priority category whose keyword appears in the prompt."""
        prompt_lower = prompt.lower()
        for task_type, words in self.keywords:
            if any(word in prompt_lower for word in words):
                return task_type
        return TaskType.GENERAL
