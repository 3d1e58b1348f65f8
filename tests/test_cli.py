"""Smoke tests for the CLI."""

from unittest.mock import patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from podcaster.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("PODCASTER_DB_URL", "PODCASTER_BASE_URL", "PODCASTER_MODEL"):
        monkeypatch.delenv(key, raising=False)
    with patch("podcaster.config.GLOBAL_CONFIG_PATH", tmp_path / "no-global.toml"):
        yield


def _db_args(tmp_path) -> list[str]:
    return ["--db-url", f"sqlite:///{tmp_path / 'cli.db'}", "--base-url", "https://cli.test"]


class TestCLI:
    def test_help(self, runner: CliRunner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("generate", "audio", "list", "recommend", "tools"):
            assert command in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "podcaster" in result.output

    def test_tools_table(self, runner: CliRunner):
        with patch("podcaster.cli.console", Console(width=200)):
            result = runner.invoke(app, ["tools"])
        assert result.exit_code == 0
        assert "weather-lookup" in result.output
        assert "confirmation" in result.output

    def test_list_empty(self, runner: CliRunner, tmp_path):
        result = runner.invoke(app, [*_db_args(tmp_path), "list"])
        assert result.exit_code == 0
        assert "No podcasts have been generated yet." in result.output

    @patch("podcaster.shared.llm.call_claude", return_value="cli-cats")
    def test_generate_then_list(self, _mock_call, runner: CliRunner, tmp_path):
        result = runner.invoke(app, [*_db_args(tmp_path), "generate", "cats"])
        assert result.exit_code == 0
        assert "https://cli.test/cli-cats" in result.output

        listing = runner.invoke(app, [*_db_args(tmp_path), "list", "--limit", "5"])
        assert "5 recent podcasts (1):" in listing.output
        assert "cats - https://cli.test/cli-cats" in listing.output

    @patch("podcaster.shared.llm.call_claude", return_value="anything")
    def test_recommend_without_podcasts(self, mock_call, runner: CliRunner, tmp_path):
        result = runner.invoke(app, [*_db_args(tmp_path), "recommend", "relaxed"])
        assert result.exit_code == 0
        assert "Generate some podcasts first" in result.output
        mock_call.assert_not_called()

    @patch("podcaster.shared.llm.call_claude")
    def test_audio_text_only_without_speech_key(self, mock_call, runner: CliRunner, tmp_path, monkeypatch):
        monkeypatch.delenv("GOOGLE_AI_API_KEY", raising=False)
        mock_call.side_effect = lambda messages, **kw: (
            "Hello listeners." if kw["label"].startswith("script") else "cat-cast"
        )

        result = runner.invoke(app, [*_db_args(tmp_path), "audio", "cats", "--accessible"])

        assert result.exit_code == 0
        assert "text-only version is available" in result.output
        assert "https://cli.test/audio-cat-cast" in result.output
