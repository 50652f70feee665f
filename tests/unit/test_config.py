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

"""Unit tests for orchestration configuration and application settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from llmchorus.orchestration.config import (
    CAPABILITY_FACTORS,
    COST_RATES,
    DEFAULT_CAPABILITIES,
    OrchestrationStrategy,
    OrchestratorConfig,
    Strength,
    parse_strategy,
)
from llmchorus.utils.config import Settings


class TestParseStrategy:
    """Tests for parse_strategy."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("parallel", OrchestrationStrategy.PARALLEL),
            ("weighted_fusion", OrchestrationStrategy.WEIGHTED_FUSION),
            ("Weighted-Fusion", OrchestrationStrategy.WEIGHTED_FUSION),
            ("  TOURNAMENT ", OrchestrationStrategy.TOURNAMENT),
            (OrchestrationStrategy.CONSENSUS, OrchestrationStrategy.CONSENSUS),
        ],
    )
    def test_valid(self, value: str, expected: OrchestrationStrategy) -> None:
        assert parse_strategy(value) == expected

    @pytest.mark.parametrize("value", [None, "", "auto", "AUTO"])
    def test_automatic(self, value: str | None) -> None:
        assert parse_strategy(value) is None

    def test_unknown_lists_valid_names(self) -> None:
        with pytest.raises(ValueError, match="weighted_fusion"):
            parse_strategy("best-of-n")


class TestDefaults:
    """Tests for built-in registries and defaults."""

    def test_registry_models(self) -> None:
        assert set(DEFAULT_CAPABILITIES) == {"gpt-4", "claude-3-opus", "gemini-1.5-pro"}
        gpt4 = DEFAULT_CAPABILITIES["gpt-4"]
        assert Strength.CODE_GENERATION in gpt4.strengths
        assert gpt4.max_context_length == 128000
        assert DEFAULT_CAPABILITIES["claude-3-opus"].supports_function_calling is False
        assert DEFAULT_CAPABILITIES["gemini-1.5-pro"].supports_streaming is False

    def test_registries_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            CAPABILITY_FACTORS["gpt-4"] = 2.0  # type: ignore[index]
        with pytest.raises(TypeError):
            COST_RATES["gpt-4"] = 1.0  # type: ignore[index]

    def test_orchestrator_config_defaults(self) -> None:
        config = OrchestratorConfig()

        assert config.default_strategy is None
        assert config.cache_ttl_seconds == 3600.0
        assert config.cache_max_entries == 1000
        assert config.provider_timeout is None
        assert config.capability_factors["gpt-4"] == 1.2


class TestSettings:
    """Tests for environment-driven Settings."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.chdir(tmp_path)
        for key in (
            "LLMCHORUS_OPENAI_API_KEY",
            "LLMCHORUS_MODELS",
            "LLMCHORUS_DEFAULT_STRATEGY",
            "LLMCHORUS_PROVIDER_TIMEOUT",
            "LLMCHORUS_CACHE_TTL_SECONDS",
            "LLMCHORUS_CACHE_MAX_ENTRIES",
        ):
            monkeypatch.delenv(key, raising=False)

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.openai_api_key is None
        assert settings.model_list == ["gpt-4"]
        assert settings.default_strategy is None
        assert settings.cache_ttl_seconds == 3600.0

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMCHORUS_OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("LLMCHORUS_MODELS", "gpt-4, claude-3-opus,,gpt-4")
        monkeypatch.setenv("LLMCHORUS_DEFAULT_STRATEGY", "Weighted-Fusion")
        monkeypatch.setenv("LLMCHORUS_CACHE_MAX_ENTRIES", "10")

        settings = Settings()

        assert settings.openai_api_key == "sk-env"
        assert settings.model_list == ["gpt-4", "claude-3-opus"]
        assert settings.default_strategy == "weighted_fusion"
        assert settings.cache_max_entries == 10

    def test_invalid_strategy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMCHORUS_DEFAULT_STRATEGY", "fastest")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMCHORUS_PROVIDER_TIMEOUT", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_to_orchestrator_config(self) -> None:
        settings = Settings(
            default_strategy="tournament",
            provider_timeout=12.5,
            cache_ttl_seconds=60,
            cache_max_entries=5,
        )
        config = settings.to_orchestrator_config()

        assert config.default_strategy == OrchestrationStrategy.TOURNAMENT
        assert config.provider_timeout == 12.5
        assert config.cache_ttl_seconds == 60
        assert config.cache_max_entries == 5
