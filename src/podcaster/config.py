"""Unified configuration loaded from .podcaster.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".podcaster.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "podcaster" / "config.toml"


class PodcastsConfig(BaseModel):
    """[podcasts] section."""

    base_url: str = "https://podcaster.example.workers.dev"
    language: str = "en"
    default_list_limit: int = 10


class LLMSectionConfig(BaseModel):
    """[llm] section."""

    model: str | None = None
    timeout: int = 120


class AudioSectionConfig(BaseModel):
    """[audio] section."""

    model: str = "gemini-2.5-flash-preview-tts"
    voice: str = "Kore"


class StoreConfig(BaseModel):
    """[store] section."""

    url: str = "sqlite:///podcasts.db"


class AgentConfig(BaseModel):
    """[agent] section."""

    system_prompt_extra: str = ""


class PodcasterConfig(BaseModel):
    """Top-level configuration model for the podcaster agent."""

    podcasts: PodcastsConfig = Field(default_factory=PodcastsConfig)
    llm: LLMSectionConfig = Field(default_factory=LLMSectionConfig)
    audio: AudioSectionConfig = Field(default_factory=AudioSectionConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)

    def podcast_url(self, slug: str) -> str:
        """Public URL for a podcast page with the given slug."""
        return f"{self.podcasts.base_url.rstrip('/')}/{slug}"


def load_config(path: str | Path | None = None) -> PodcasterConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .podcaster.toml in CWD
    3. ~/.config/podcaster/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged PodcasterConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = PodcasterConfig.model_validate(data) if data else PodcasterConfig()
    return _apply_env_vars(config)


def merge_cli_overrides(config: PodcasterConfig, **cli_kwargs: object) -> PodcasterConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "base_url": ("podcasts", "base_url"),
        "language": ("podcasts", "language"),
        "db_url": ("store", "url"),
        "model": ("llm", "model"),
        "voice": ("audio", "voice"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = value

    return PodcasterConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PodcasterConfig) -> PodcasterConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "PODCASTER_BASE_URL": ("podcasts", "base_url"),
        "PODCASTER_LANGUAGE": ("podcasts", "language"),
        "PODCASTER_DB_URL": ("store", "url"),
        "PODCASTER_MODEL": ("llm", "model"),
        "PODCASTER_AUDIO_MODEL": ("audio", "model"),
        "PODCASTER_VOICE": ("audio", "voice"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    timeout_raw = os.environ.get("PODCASTER_LLM_TIMEOUT")
    if timeout_raw is not None:
        try:
            data["llm"]["timeout"] = int(timeout_raw)
        except ValueError:
            logger.warning("Ignoring non-numeric PODCASTER_LLM_TIMEOUT: %r", timeout_raw)

    return PodcasterConfig.model_validate(data)
