"""Tests for settling tool invocations across a conversation."""

from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from podcaster.agent.messages import (
    ChatMessage,
    ConfirmationState,
    Decision,
    ToolDecision,
    ToolInvocation,
)
from podcaster.agent.resolver import REJECTION_NOTICE, resolve_tool_invocations
from podcaster.agent.tools import ToolRegistry, ToolSpec


class NoteParams(BaseModel):
    note: str


@pytest.fixture
def auto_fn():
    return MagicMock(side_effect=lambda params, ctx: f"auto:{params.note}")


@pytest.fixture
def gated_fn():
    return MagicMock(side_effect=lambda params, ctx: f"gated:{params.note}")


@pytest.fixture
def registry(auto_fn, gated_fn):
    registry = ToolRegistry()
    registry.register(ToolSpec.declare("auto", "Runs at once", NoteParams, auto_fn))
    registry.register(ToolSpec.declare("gated", "Needs approval", NoteParams))
    registry.register_execution("gated", gated_fn)
    return registry


def _call(name: str, note: str = "x") -> ToolInvocation:
    return ToolInvocation(name=name, arguments={"note": note})


class TestAutoExecutable:
    def test_executes_with_context(self, registry, tool_context, auto_fn):
        invocation = _call("auto", "hi")
        results = resolve_tool_invocations([ChatMessage.assistant(invocations=[invocation])], registry, tool_context)

        assert [r.output for r in results] == ["auto:hi"]
        assert invocation.state is ConfirmationState.EXECUTED
        assert auto_fn.call_args.args[1] is tool_context

    def test_error_becomes_text(self, registry, tool_context, auto_fn):
        auto_fn.side_effect = RuntimeError("kaboom")
        invocation = _call("auto")

        results = resolve_tool_invocations([ChatMessage.assistant(invocations=[invocation])], registry, tool_context)

        assert results[0].output == "Error executing tool auto: kaboom"
        assert invocation.state is ConfirmationState.EXECUTED

    def test_invalid_arguments_become_text(self, registry, tool_context, auto_fn):
        invocation = ToolInvocation(name="auto", arguments={"wrong": 1})
        results = resolve_tool_invocations([ChatMessage.assistant(invocations=[invocation])], registry, tool_context)
        assert results[0].output.startswith("Error executing tool auto:")
        auto_fn.assert_not_called()

    def test_unknown_tool_becomes_text(self, registry, tool_context):
        invocation = ToolInvocation(name="nope")
        results = resolve_tool_invocations([ChatMessage.assistant(invocations=[invocation])], registry, tool_context)
        assert results[0].output == "Error executing tool nope: unknown tool"

    def test_settled_invocations_not_rerun(self, registry, tool_context, auto_fn):
        messages = [ChatMessage.assistant(invocations=[_call("auto")])]
        resolve_tool_invocations(messages, registry, tool_context)
        assert resolve_tool_invocations(messages, registry, tool_context) == []
        assert auto_fn.call_count == 1


class TestConfirmationRequired:
    def test_undecided_stays_pending_and_is_not_run(self, registry, tool_context, gated_fn):
        invocation = _call("gated")
        results = resolve_tool_invocations([ChatMessage.assistant(invocations=[invocation])], registry, tool_context)

        assert results == []
        assert invocation.state is ConfirmationState.PENDING
        gated_fn.assert_not_called()

    def test_approval_runs_with_original_arguments(self, registry, tool_context, gated_fn):
        invocation = _call("gated", "original")
        messages = [
            ChatMessage.assistant(invocations=[invocation]),
            ChatMessage.user("yes", decisions=[ToolDecision(invocation_id=invocation.id, decision=Decision.APPROVED)]),
        ]

        results = resolve_tool_invocations(messages, registry, tool_context)

        assert [r.output for r in results] == ["gated:original"]
        assert invocation.state is ConfirmationState.EXECUTED
        gated_fn.assert_called_once()

    def test_rejection_attaches_notice(self, registry, tool_context, gated_fn):
        invocation = _call("gated")
        messages = [
            ChatMessage.assistant(invocations=[invocation]),
            ChatMessage.user("no", decisions=[ToolDecision(invocation_id=invocation.id, decision=Decision.REJECTED)]),
        ]

        results = resolve_tool_invocations(messages, registry, tool_context)

        assert results[0].output == REJECTION_NOTICE
        assert results[0].state is ConfirmationState.REJECTED
        gated_fn.assert_not_called()

    def test_approved_execution_error_becomes_text(self, registry, tool_context, gated_fn):
        gated_fn.side_effect = ValueError("bad city")
        invocation = _call("gated")
        messages = [
            ChatMessage.assistant(invocations=[invocation]),
            ChatMessage.user("ok", decisions=[ToolDecision(invocation_id=invocation.id, decision=Decision.APPROVED)]),
        ]
        results = resolve_tool_invocations(messages, registry, tool_context)
        assert results[0].output == "Error executing tool gated: bad city"


class TestMixedTurns:
    @pytest.mark.parametrize(("n_auto", "m_pending"), [(0, 3), (2, 0), (3, 2), (1, 5)])
    def test_n_auto_results_regardless_of_pending(self, registry, tool_context, n_auto, m_pending):
        invocations = [_call("gated", f"g{i}") for i in range(m_pending)]
        invocations += [_call("auto", f"a{i}") for i in range(n_auto)]

        results = resolve_tool_invocations([ChatMessage.assistant(invocations=invocations)], registry, tool_context)

        assert len(results) == n_auto
        assert all(r.tool_name == "auto" for r in results)

    def test_results_follow_invocation_order(self, registry, tool_context):
        first, gated, second = _call("auto", "1"), _call("gated", "2"), _call("auto", "3")
        messages = [
            ChatMessage.assistant(invocations=[first, gated]),
            ChatMessage.assistant(invocations=[second]),
            ChatMessage.user("go", decisions=[ToolDecision(invocation_id=gated.id, decision=Decision.APPROVED)]),
        ]

        results = resolve_tool_invocations(messages, registry, tool_context)

        assert [r.invocation_id for r in results] == [first.id, gated.id, second.id]

    def test_failure_does_not_block_siblings(self, registry, tool_context, auto_fn):
        auto_fn.side_effect = [RuntimeError("first fails"), "second ok"]
        results = resolve_tool_invocations(
            [ChatMessage.assistant(invocations=[_call("auto"), _call("auto")])], registry, tool_context
        )
        assert results[0].output.startswith("Error executing tool auto")
        assert results[1].output == "second ok"

    def test_first_decision_wins(self, registry, tool_context, gated_fn):
        invocation = _call("gated")
        messages = [
            ChatMessage.assistant(invocations=[invocation]),
            ChatMessage.user("no", decisions=[ToolDecision(invocation_id=invocation.id, decision=Decision.REJECTED)]),
            ChatMessage.user("yes", decisions=[ToolDecision(invocation_id=invocation.id, decision=Decision.APPROVED)]),
        ]
        results = resolve_tool_invocations(messages, registry, tool_context)
        assert len(results) == 1
        assert results[0].state is ConfirmationState.REJECTED
        gated_fn.assert_not_called()
