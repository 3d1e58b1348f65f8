"""Settles the tool invocations in a conversation.

Each unsettled invocation is handled on its own:

- auto-executable tools run immediately;
- confirmation-required tools run after an approval, get a rejection
  notice after a rejection, and are left pending when no decision exists.

Execution errors become text results. Nothing raised by a tool escapes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel

from podcaster.agent.context import ToolContext
from podcaster.agent.messages import (
    ChatMessage,
    ConfirmationState,
    Decision,
    ToolDecision,
    ToolInvocation,
)
from podcaster.agent.tools import AutoExecutable, ConfirmationRequired, ToolFunction, ToolRegistry
from podcaster.errors import ToolExecutionFailure

logger = logging.getLogger(__name__)

REJECTION_NOTICE = "Error: User denied access to tool execution"


@dataclass(frozen=True)
class ToolResult:
    invocation_id: str
    tool_name: str
    state: ConfirmationState
    output: str


def unsettled_invocations(messages: Sequence[ChatMessage]) -> list[ToolInvocation]:
    return [
        invocation
        for message in messages
        for invocation in message.tool_invocations
        if not invocation.settled
    ]


def collect_decisions(messages: Sequence[ChatMessage]) -> dict[str, ToolDecision]:
    """First decision recorded for each invocation id."""
    decisions: dict[str, ToolDecision] = {}
    for message in messages:
        for decision in message.decisions:
            decisions.setdefault(decision.invocation_id, decision)
    return decisions


def resolve_tool_invocations(
    messages: Sequence[ChatMessage], registry: ToolRegistry, ctx: ToolContext
) -> list[ToolResult]:
    """Settle every invocation that can be settled now, in invocation order.

    Invocations still awaiting a decision produce no result.
    """
    decisions = collect_decisions(messages)
    results: list[ToolResult] = []

    for invocation in unsettled_invocations(messages):
        spec = registry.get(invocation.name)
        if spec is None:
            invocation.complete(_error_text(invocation.name, ValueError("unknown tool")))
            results.append(_result(invocation))
            continue

        match spec.gating:
            case AutoExecutable(execute=execute):
                invocation.complete(_run(spec.parameters, execute, invocation, ctx))
            case ConfirmationRequired():
                decision = decisions.get(invocation.id)
                if decision is None:
                    logger.debug("Invocation %s (%s) awaits confirmation", invocation.id, invocation.name)
                    continue
                if not _settle_confirmed(invocation, decision, spec.parameters, registry, ctx):
                    continue

        results.append(_result(invocation))

    return results


def _settle_confirmed(
    invocation: ToolInvocation,
    decision: ToolDecision,
    parameters: type[BaseModel],
    registry: ToolRegistry,
    ctx: ToolContext,
) -> bool:
    if decision.decision is Decision.REJECTED:
        logger.info("User rejected %s (%s)", invocation.name, invocation.id)
        invocation.reject(REJECTION_NOTICE)
        return True

    execute = registry.execution_for(invocation.name)
    if execute is None:
        logger.warning("No execution registered for approved tool %s", invocation.name)
        return False
    if invocation.state is ConfirmationState.PENDING:
        invocation.approve()
    invocation.complete(_run(parameters, execute, invocation, ctx))
    return True


def _run(
    parameters: type[BaseModel], execute: ToolFunction, invocation: ToolInvocation, ctx: ToolContext
) -> str:
    try:
        params = parameters.model_validate(invocation.arguments)
        return execute(params, ctx)
    except Exception as exc:
        failure = ToolExecutionFailure(invocation.name, exc)
        logger.warning("Tool execution failed: %s", failure, exc_info=True)
        return _error_text(invocation.name, exc)


def _error_text(name: str, exc: BaseException) -> str:
    return f"Error executing tool {name}: {exc}"


def _result(invocation: ToolInvocation) -> ToolResult:
    return ToolResult(
        invocation_id=invocation.id,
        tool_name=invocation.name,
        state=invocation.state,
        output=invocation.result or "",
    )
