"""Tool declarations and the registry the chat model sees.

A tool is either ``AutoExecutable`` (it carries its execution function and
runs as soon as it is invoked) or ``ConfirmationRequired`` (it carries no
function; one is registered separately and only runs after a human
approves the invocation). A tool declared without a function is
confirmation-required. There is no other rule.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from podcaster.agent.context import ToolContext

logger = logging.getLogger(__name__)

ToolFunction = Callable[[BaseModel, "ToolContext"], str]


@dataclass(frozen=True)
class AutoExecutable:
    execute: ToolFunction


@dataclass(frozen=True)
class ConfirmationRequired:
    pass


Gating = AutoExecutable | ConfirmationRequired


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    parameters: type[BaseModel]
    gating: Gating

    @classmethod
    def declare(
        cls,
        name: str,
        description: str,
        parameters: type[BaseModel],
        execute: ToolFunction | None = None,
    ) -> ToolSpec:
        gating: Gating = AutoExecutable(execute) if execute is not None else ConfirmationRequired()
        return cls(name=name, description=description, parameters=parameters, gating=gating)

    @property
    def requires_confirmation(self) -> bool:
        return isinstance(self.gating, ConfirmationRequired)

    def definition(self) -> dict[str, Any]:
        """Name, description and JSON schema, as offered to the chat model."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.parameters.model_json_schema(),
        }


class ToolRegistry:
    """Named tools plus the execution functions of confirmation-required ones."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}
        self._executions: dict[str, ToolFunction] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def register_execution(self, name: str, execute: ToolFunction) -> None:
        """Bind the function run after a confirmation-required tool is approved."""
        spec = self._tools.get(name)
        if spec is None:
            raise KeyError(f"Unknown tool: {name}")
        if not spec.requires_confirmation:
            raise ValueError(f"Tool {name} is auto-executable and carries its own function")
        self._executions[name] = execute

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def execution_for(self, name: str) -> ToolFunction | None:
        return self._executions.get(name)

    def tool_definitions(self) -> list[dict[str, Any]]:
        return [spec.definition() for spec in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
