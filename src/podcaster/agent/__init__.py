"""Chat agent: sessions, tools, confirmation gating and scheduling."""

from podcaster.agent.context import ToolContext
from podcaster.agent.messages import ChatMessage, ConfirmationState, ToolDecision, ToolInvocation
from podcaster.agent.resolver import ToolResult, resolve_tool_invocations
from podcaster.agent.runtime import Agent
from podcaster.agent.session import Session, SessionState
from podcaster.agent.tools import AutoExecutable, ConfirmationRequired, ToolRegistry, ToolSpec

__all__ = [
    "Agent",
    "AutoExecutable",
    "ChatMessage",
    "ConfirmationRequired",
    "ConfirmationState",
    "Session",
    "SessionState",
    "ToolContext",
    "ToolDecision",
    "ToolInvocation",
    "ToolRegistry",
    "ToolResult",
    "ToolSpec",
    "resolve_tool_invocations",
]
