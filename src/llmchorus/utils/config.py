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

"""Configuration management for llmchorus.

Handles API credentials, the model roster and orchestrator tuning using
Pydantic Settings.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from llmchorus.orchestration.config import OrchestratorConfig, parse_strategy


class Settings(BaseSettings):
    """Application settings.

    Loads configuration from environment variables or .env file.
    All settings can be overridden via environment variables with LLMCHORUS_ prefix.

    Example .env file:
        LLMCHORUS_OPENAI_API_KEY=sk-...
        LLMCHORUS_MODELS=gpt-4,gpt-4o-mini
        LLMCHORUS_DEFAULT_STRATEGY=weighted_fusion
        LLMCHORUS_PROVIDER_TIMEOUT=20

    Example usage:
        >>> settings = Settings()
        >>> print(settings.model_list)
        ['gpt-4', 'gpt-4o-mini']
    """

    # Provider credentials
    openai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible endpoint",
        json_schema_extra={"env": "LLMCHORUS_OPENAI_API_KEY"},
    )

    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible endpoint",
        json_schema_extra={"env": "LLMCHORUS_OPENAI_BASE_URL"},
    )

    models: str = Field(
        default="gpt-4",
        description="Comma-separated models to query in parallel",
        json_schema_extra={"env": "LLMCHORUS_MODELS"},
    )

    # Orchestration
    default_strategy: str | None = Field(
        default=None,
        description="Force a strategy for every query (empty or 'auto' = by task type)",
        json_schema_extra={"env": "LLMCHORUS_DEFAULT_STRATEGY"},
    )

    provider_timeout: float = Field(
        default=30.0,
        description="Per-provider timeout in seconds",
        gt=0,
        json_schema_extra={"env": "LLMCHORUS_PROVIDER_TIMEOUT"},
    )

    max_retries: int = Field(
        default=2,
        description="Retries per provider call for transient errors",
        ge=0,
        json_schema_extra={"env": "LLMCHORUS_MAX_RETRIES"},
    )

    # Cache
    cache_ttl_seconds: float = Field(
        default=3600.0,
        description="Time-to-live of cached fused responses (seconds)",
        gt=0,
        json_schema_extra={"env": "LLMCHORUS_CACHE_TTL_SECONDS"},
    )

    cache_max_entries: int = Field(
        default=1000,
        description="Maximum number of cached fused responses",
        ge=1,
        json_schema_extra={"env": "LLMCHORUS_CACHE_MAX_ENTRIES"},
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        json_schema_extra={"env": "LLMCHORUS_LOG_LEVEL"},
    )

    log_all_responses: bool = Field(
        default=False,
        description="Log every provider outcome at DEBUG level",
        json_schema_extra={"env": "LLMCHORUS_LOG_ALL_RESPONSES"},
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLMCHORUS_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_strategy")
    @classmethod
    def _check_strategy(cls, value: str | None) -> str | None:
        strategy = parse_strategy(value)
        return strategy.value if strategy else None

    @property
    def model_list(self) -> list[str]:
        """Configured models, in order, without blanks or duplicates."""
        seen: list[str] = []
        for name in self.models.split(","):
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    def to_orchestrator_config(self) -> OrchestratorConfig:
        """Build an OrchestratorConfig from these settings."""
        return OrchestratorConfig(
            default_strategy=parse_strategy(self.default_strategy),
            cache_ttl_seconds=self.cache_ttl_seconds,
            cache_max_entries=self.cache_max_entries,
            provider_timeout=self.provider_timeout,
            log_all_responses=self.log_all_responses,
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
