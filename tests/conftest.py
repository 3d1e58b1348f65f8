"""Shared fixtures: a throwaway SQLite store, config and capability doubles."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from podcaster.config import PodcasterConfig, PodcastsConfig
from podcaster.podcasts.store import PodcastStore
from podcaster.shared.llm import PromptMessage

BASE_URL = "https://pods.test"


class ScriptedText:
    """Text capability double answering by label prefix.

    A response may be a string or an exception to raise.
    """

    def __init__(
        self,
        responses: dict[str, str | Exception] | None = None,
        default: str | Exception = "",
    ) -> None:
        self.responses = responses or {}
        self.default = default
        self.calls: list[tuple[str, list[PromptMessage]]] = []

    def generate(self, messages: Sequence[PromptMessage], *, label: str = "generation") -> str:
        self.calls.append((label, list(messages)))
        response = self.default
        for prefix, candidate in self.responses.items():
            if label.startswith(prefix):
                response = candidate
                break
        if isinstance(response, Exception):
            raise response
        return response

    def labels(self) -> list[str]:
        return [label for label, _ in self.calls]


@pytest.fixture
def config() -> PodcasterConfig:
    return PodcasterConfig(podcasts=PodcastsConfig(base_url=BASE_URL))


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'podcasts.db'}"


@pytest.fixture
def store(db_url: str) -> PodcastStore:
    return PodcastStore(db_url)


@pytest.fixture
def broken_store(tmp_path: Path) -> PodcastStore:
    """A store whose database file can never be opened."""
    return PodcastStore(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'podcasts.db'}")


@pytest.fixture
def scripted() -> type[ScriptedText]:
    """The ScriptedText class, for building text doubles inside tests."""
    return ScriptedText


@pytest.fixture
def session():
    from podcaster.agent.session import Session

    return Session("test-session")


@pytest.fixture
def tool_context(session, config, store, scripted):
    """ToolContext over a real store, a silent text double and a mock audio capability."""
    from unittest.mock import MagicMock

    from podcaster.agent.context import ToolContext
    from podcaster.agent.scheduler import InMemoryScheduler

    return ToolContext(
        session=session,
        config=config,
        store=store,
        text=scripted(),
        audio=MagicMock(),
        scheduler=InMemoryScheduler(session),
    )
