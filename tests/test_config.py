"""Tests for podcaster.config: PodcasterConfig, TOML loading, overrides."""

from pathlib import Path
from unittest.mock import patch

import pytest

from podcaster.config import PodcasterConfig, load_config, merge_cli_overrides

ENV_VARS = (
    "PODCASTER_BASE_URL",
    "PODCASTER_LANGUAGE",
    "PODCASTER_DB_URL",
    "PODCASTER_MODEL",
    "PODCASTER_AUDIO_MODEL",
    "PODCASTER_VOICE",
    "PODCASTER_LLM_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


class TestPodcasterConfigDefaults:
    def test_defaults(self):
        cfg = PodcasterConfig()
        assert cfg.podcasts.language == "en"
        assert cfg.podcasts.default_list_limit == 10
        assert cfg.llm.model is None
        assert cfg.llm.timeout == 120
        assert cfg.audio.voice == "Kore"
        assert cfg.store.url == "sqlite:///podcasts.db"
        assert cfg.agent.system_prompt_extra == ""

    def test_podcast_url_joins_without_double_slash(self):
        cfg = PodcasterConfig.model_validate({"podcasts": {"base_url": "https://x.test/"}})
        assert cfg.podcast_url("cats") == "https://x.test/cats"


class TestLoadConfig:
    def test_explicit_path(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text(
            '[podcasts]\nbase_url = "https://pods.example"\ndefault_list_limit = 3\n'
            '[store]\nurl = "sqlite:///other.db"\n'
        )
        cfg = load_config(path)
        assert cfg.podcasts.base_url == "https://pods.example"
        assert cfg.podcasts.default_list_limit == 3
        assert cfg.store.url == "sqlite:///other.db"

    def test_missing_explicit_path_uses_defaults(self, tmp_path: Path):
        cfg = load_config(tmp_path / "nope.toml")
        assert cfg == PodcasterConfig()

    def test_finds_file_in_cwd(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".podcaster.toml").write_text('[audio]\nvoice = "Puck"\n')
        monkeypatch.chdir(tmp_path)
        with patch("podcaster.config.GLOBAL_CONFIG_PATH", tmp_path / "global.toml"):
            cfg = load_config()
        assert cfg.audio.voice == "Puck"

    def test_falls_back_to_global(self, tmp_path: Path, monkeypatch):
        global_path = tmp_path / "global.toml"
        global_path.write_text('[llm]\nmodel = "sonnet"\n')
        monkeypatch.chdir(tmp_path)
        with patch("podcaster.config.GLOBAL_CONFIG_PATH", global_path):
            cfg = load_config()
        assert cfg.llm.model == "sonnet"

    def test_corrupt_toml_falls_back_to_defaults(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[podcasts\nbase_url = ")
        cfg = load_config(path)
        assert cfg.podcasts.base_url == PodcasterConfig().podcasts.base_url

    def test_env_vars_override_toml(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "c.toml"
        path.write_text('[podcasts]\nbase_url = "https://toml.example"\n')
        monkeypatch.setenv("PODCASTER_BASE_URL", "https://env.example")
        monkeypatch.setenv("PODCASTER_DB_URL", "sqlite:///env.db")
        monkeypatch.setenv("PODCASTER_LLM_TIMEOUT", "30")
        cfg = load_config(path)
        assert cfg.podcasts.base_url == "https://env.example"
        assert cfg.store.url == "sqlite:///env.db"
        assert cfg.llm.timeout == 30

    def test_non_numeric_timeout_keeps_default(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PODCASTER_LLM_TIMEOUT", "soon")
        monkeypatch.setenv("PODCASTER_BASE_URL", "https://env.example")
        cfg = load_config(tmp_path / "missing.toml")
        assert cfg.llm.timeout == 120
        assert cfg.podcasts.base_url == "https://env.example"


class TestMergeCliOverrides:
    def test_only_set_flags_override(self):
        cfg = merge_cli_overrides(PodcasterConfig(), db_url="sqlite:///cli.db", model=None)
        assert cfg.store.url == "sqlite:///cli.db"
        assert cfg.llm.model is None

    def test_unknown_keys_ignored(self):
        cfg = merge_cli_overrides(PodcasterConfig(), colour="blue")
        assert cfg == PodcasterConfig()

    def test_voice_and_base_url(self):
        cfg = merge_cli_overrides(PodcasterConfig(), voice="Puck", base_url="https://cli.test")
        assert cfg.audio.voice == "Puck"
        assert cfg.podcasts.base_url == "https://cli.test"
