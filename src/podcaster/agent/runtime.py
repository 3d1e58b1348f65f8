"""Wires sessions to the tool registry, store and capabilities."""

from __future__ import annotations

import logging

from podcaster.agent.builtins import build_default_registry
from podcaster.agent.context import ToolContext
from podcaster.agent.messages import ChatMessage
from podcaster.agent.prompts import build_system_prompt
from podcaster.agent.resolver import ToolResult, resolve_tool_invocations
from podcaster.agent.scheduler import InMemoryScheduler, SchedulingFacility
from podcaster.agent.session import Session
from podcaster.agent.tools import ToolRegistry
from podcaster.config import PodcasterConfig
from podcaster.pipeline.common import AudioCapability, TextCapability
from podcaster.podcasts.store import PodcastStore

logger = logging.getLogger(__name__)


class Agent:
    """Owns the shared collaborators and opens sessions against them.

    Sessions share only the store; each gets its own state, lock, context
    and scheduler.
    """

    def __init__(
        self,
        config: PodcasterConfig,
        *,
        store: PodcastStore,
        text: TextCapability,
        audio: AudioCapability,
        registry: ToolRegistry | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.text = text
        self.audio = audio
        self.registry = registry or build_default_registry()
        self._contexts: dict[str, ToolContext] = {}

    def open_session(self, session_id: str, scheduler: SchedulingFacility | None = None) -> Session:
        session = Session(session_id, turn_handler=self.handle_turn)
        self._contexts[session_id] = ToolContext(
            session=session,
            config=self.config,
            store=self.store,
            text=self.text,
            audio=self.audio,
            scheduler=scheduler or InMemoryScheduler(session),
        )
        return session

    def context_for(self, session: Session) -> ToolContext:
        return self._contexts[session.id]

    def system_prompt(self) -> str:
        return build_system_prompt(extra=self.config.agent.system_prompt_extra)

    def handle_turn(self, session: Session) -> list[ToolResult]:
        """Settle pending tool invocations and append their results to the history."""
        ctx = self.context_for(session)
        results = resolve_tool_invocations(session.state.messages, self.registry, ctx)
        for result in results:
            session.state.append_message(ChatMessage.tool(result.output))
        logger.debug("Session %s settled %d invocation(s)", session.id, len(results))
        return results
