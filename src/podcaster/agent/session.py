"""Per-session state and turn serialization."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from podcaster.agent.messages import ChatMessage
from podcaster.podcasts.models import PodcastRecord

logger = logging.getLogger(__name__)

EXECUTE_TASK = "execute_task"


def _now() -> datetime:
    return datetime.now(tz=UTC)


class SessionState(BaseModel):
    """State owned by a single session.

    Mutate only through ``append_message``, ``record_podcast`` and ``touch``,
    and only while the owning session's turn is active.
    """

    messages: list[ChatMessage] = Field(default_factory=list)
    podcasts: list[PodcastRecord] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_now)

    def append_message(self, message: ChatMessage) -> None:
        self.messages.append(message)
        self.touch()

    def record_podcast(self, record: PodcastRecord) -> None:
        self.podcasts.append(record)
        self.touch()

    def touch(self) -> None:
        self.last_updated = _now()


TurnHandler = Callable[["Session"], None]


class Session:
    """A conversation with its own state and one active turn at a time."""

    def __init__(self, session_id: str, turn_handler: TurnHandler | None = None) -> None:
        self.id = session_id
        self.state = SessionState()
        self.turn_handler = turn_handler
        self._lock = threading.RLock()

    @contextmanager
    def turn(self) -> Iterator[SessionState]:
        """Hold the session's turn lock for the duration of the block."""
        with self._lock:
            yield self.state

    def submit(self, message: ChatMessage) -> None:
        """Append an inbound message and process the turn."""
        with self.turn() as state:
            state.append_message(message)
            if self.turn_handler is not None:
                self.turn_handler(self)

    # ── Scheduled operations ─────────────────────────────────────

    def run_operation(self, name: str, payload: str) -> None:
        """Entry point for the scheduling facility when an operation fires."""
        operations: dict[str, Callable[[str], None]] = {EXECUTE_TASK: self.execute_task}
        operation = operations.get(name)
        if operation is None:
            logger.warning("Session %s has no operation named %s", self.id, name)
            return
        operation(payload)

    def execute_task(self, payload: str) -> None:
        logger.info("Running scheduled task for session %s", self.id)
        self.submit(ChatMessage.user(f"scheduled message: {payload}"))
