"""Chat history models: messages, tool invocations and human decisions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from podcaster.errors import InvocationStateError


def _new_id() -> str:
    return uuid.uuid4().hex


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ConfirmationState(StrEnum):
    """Life cycle of a tool invocation.

    pending → approved → executed, pending → rejected, or pending → executed
    for tools that run without confirmation.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXECUTED = "executed"

    @property
    def terminal(self) -> bool:
        return self in (ConfirmationState.EXECUTED, ConfirmationState.REJECTED)


class ToolInvocation(BaseModel):
    """A tool call requested by the assistant."""

    id: str = Field(default_factory=_new_id)
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    state: ConfirmationState = ConfirmationState.PENDING
    result: str | None = None

    @property
    def settled(self) -> bool:
        return self.state.terminal

    def approve(self) -> None:
        if self.state is not ConfirmationState.PENDING:
            raise InvocationStateError(f"Cannot approve invocation {self.id} in state {self.state}")
        self.state = ConfirmationState.APPROVED

    def complete(self, result: str) -> None:
        """Attach the execution result. Allowed once, from pending or approved."""
        if self.settled:
            raise InvocationStateError(f"Invocation {self.id} already settled as {self.state}")
        self.state = ConfirmationState.EXECUTED
        self.result = result

    def reject(self, notice: str) -> None:
        if self.state is not ConfirmationState.PENDING:
            raise InvocationStateError(f"Cannot reject invocation {self.id} in state {self.state}")
        self.state = ConfirmationState.REJECTED
        self.result = notice


class Decision(StrEnum):
    APPROVED = "approved"
    REJECTED = "rejected"


class ToolDecision(BaseModel):
    """A human's answer to a confirmation-required invocation."""

    invocation_id: str
    decision: Decision


class ChatMessage(BaseModel):
    id: str = Field(default_factory=_new_id)
    role: Role
    content: str = ""
    tool_invocations: list[ToolInvocation] = Field(default_factory=list)
    decisions: list[ToolDecision] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @classmethod
    def user(cls, content: str, decisions: list[ToolDecision] | None = None) -> ChatMessage:
        return cls(role=Role.USER, content=content, decisions=decisions or [])

    @classmethod
    def assistant(
        cls, content: str = "", invocations: list[ToolInvocation] | None = None
    ) -> ChatMessage:
        return cls(role=Role.ASSISTANT, content=content, tool_invocations=invocations or [])

    @classmethod
    def tool(cls, content: str) -> ChatMessage:
        return cls(role=Role.TOOL, content=content)
