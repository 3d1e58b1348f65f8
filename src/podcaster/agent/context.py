"""Explicit context handed to every tool execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from podcaster.config import PodcasterConfig
from podcaster.pipeline.common import AudioCapability, TextCapability
from podcaster.podcasts.store import PodcastStore

if TYPE_CHECKING:
    from podcaster.agent.scheduler import SchedulingFacility
    from podcaster.agent.session import Session


@dataclass
class ToolContext:
    """Everything a tool may touch: its session, config, store and capabilities."""

    session: Session
    config: PodcasterConfig
    store: PodcastStore
    text: TextCapability
    audio: AudioCapability
    scheduler: SchedulingFacility
