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

"""Orchestration-level errors.

Individual provider failures never surface as exceptions; they are recorded
as failed ProviderResults. Only these errors reach the caller.
"""


class OrchestrationError(Exception):
    """Base exception for orchestration failures."""

    pass


class NoSuccessfulResponsesError(OrchestrationError):
    """Raised when every dispatched provider failed."""

    def __init__(self, failures: dict[str, str] | None = None):
        self.failures = failures or {}
        message = "No successful responses"
        if self.failures:
            details = "; ".join(f"{name}: {error}" for name, error in self.failures.items())
            message = f"{message} ({details})"
        super().__init__(message)


class NoProvidersError(OrchestrationError):
    """Raised when the orchestrator has no providers configured."""

    def __init__(self) -> None:
        super().__init__("No providers registered")
