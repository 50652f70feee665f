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

"""Unit tests for the llmchorus CLI."""

from __future__ import annotations

import json
import re

import pytest
from typer.testing import CliRunner

from llmchorus import __version__
from llmchorus.cli import main as cli_main
from llmchorus.cli.demo import DemoProvider, create_demo_providers
from llmchorus.cli.main import app
from llmchorus.utils import config as config_module


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    ansi_escape = re.compile(r"\x1b\[[0-9;]*m")
    return ansi_escape.sub("", text)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Fresh settings per test, no .env from the working tree."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LLMCHORUS_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("LLMCHORUS_MODELS", raising=False)
    monkeypatch.delenv("LLMCHORUS_DEFAULT_STRATEGY", raising=False)
    monkeypatch.setattr(config_module, "_settings", None)


@pytest.fixture(autouse=True)
def _instant_demo(monkeypatch: pytest.MonkeyPatch) -> None:
    """Demo providers answer without simulated delay."""
    monkeypatch.setattr(cli_main, "create_demo_providers", lambda: create_demo_providers(0.0))


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in strip_ansi(result.stdout)


class TestQueryCommand:
    """Tests for `llmchorus query`."""

    def test_demo_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["query", "Write a poem about rain", "--demo", "--json"])

        assert result.exit_code == 0, result.stdout
        data = json.loads(result.stdout)
        assert data["strategy"] == "tournament"
        assert data["task_type"] == "creative"
        assert data["metrics"]["models_used"] == 3
        assert data["consensus"]["key_points"][0].startswith("Winner: ")

    def test_demo_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["query", "Explain the CAP theorem", "--demo"])

        output = strip_ansi(result.stdout)
        assert result.exit_code == 0, output
        assert "Fused response" in output
        assert "claude-3-opus" in output
        assert "weighted_fusion" in output

    def test_forced_strategy(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            app, ["query", "Explain the CAP theorem", "--demo", "--json", "-s", "parallel"]
        )

        assert result.exit_code == 0, result.stdout
        data = json.loads(result.stdout)
        assert data["strategy"] == "parallel"
        assert data["contributions"][0]["model"] == "gpt-4"

    def test_unknown_strategy(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["query", "hi", "--demo", "--strategy", "fastest"])

        assert result.exit_code == 1
        assert "Unknown strategy" in strip_ansi(result.stdout)

    def test_missing_api_key(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["query", "hi"])

        assert result.exit_code == 1
        assert "LLMCHORUS_OPENAI_API_KEY" in strip_ansi(result.stdout)

    def test_no_models(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLMCHORUS_OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("LLMCHORUS_MODELS", " , ")

        result = cli_runner.invoke(app, ["query", "hi"])

        assert result.exit_code == 1
        assert "No providers registered" in strip_ansi(result.stdout)

    def test_summarize_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            app, ["query", "Explain the CAP theorem", "--demo", "--summarize"]
        )

        output = strip_ansi(result.stdout)
        assert result.exit_code == 0, output
        assert "Fused response" in output
        assert "Summary of responses" in output

    def test_summarize_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            app, ["query", "Explain the CAP theorem", "--demo", "--summarize", "--json"]
        )

        assert result.exit_code == 0, result.stdout
        data = json.loads(result.stdout)
        assert data["response"]["strategy"] == "weighted_fusion"
        assert isinstance(data["summary"], str) and data["summary"]


class TestOptimizeCommand:
    """Tests for `llmchorus optimize`."""

    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["optimize", "Explain recursion"])

        output = strip_ansi(result.stdout)
        assert result.exit_code == 0, output
        assert "Optimized prompt" in output
        assert "Chain of Thought" in output
        assert "Structure Enhancement" in output

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["optimize", "Explain recursion", "--json"])

        assert result.exit_code == 0, result.stdout
        data = json.loads(result.stdout)
        assert data["original"] == "Explain recursion"
        assert data["context"]["task_type"] == "analysis"
        assert len(data["variations"]) == 3


class TestClassifyCommand:
    """Tests for `llmchorus classify`."""

    @pytest.mark.parametrize(
        ("prompt", "task_type", "runs_as"),
        [
            ("Implement a parser", "code", "parallel"),
            ("Write a story", "creative", "tournament"),
            ("Calculate the mean", "mathematics", "consensus"),
            ("Hello there", "general", "weighted_fusion"),
        ],
    )
    def test_classify(
        self, cli_runner: CliRunner, prompt: str, task_type: str, runs_as: str
    ) -> None:
        result = cli_runner.invoke(app, ["classify", prompt])

        output = strip_ansi(result.stdout)
        assert result.exit_code == 0
        assert task_type in output
        assert runs_as in output


class TestDemoProvider:
    """Tests for the demo provider."""

    @pytest.mark.asyncio
    async def test_canned_reply(self) -> None:
        provider = DemoProvider(model="demo", delay=0.0, prefix="> ")
        reply = await provider.send("Implement fibonacci")

        assert provider.name == "demo"
        assert reply.text.startswith("> Here is")
        assert "```python" in reply.text
        assert reply.tokens_used and reply.tokens_used > 0

    def test_one_provider_per_registry_model(self) -> None:
        names = [p.name for p in create_demo_providers()]
        assert names == ["gpt-4", "claude-3-opus", "gemini-1.5-pro"]
