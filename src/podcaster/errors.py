"""Error taxonomy shared across the agent, pipelines, and store.

Pipelines catch these at the stage where they occur and convert them to
a fallback or an omission; none of them should reach the chat transport.
"""

from __future__ import annotations


class PodcasterError(Exception):
    """Base error for the podcaster package."""


class CapabilityUnavailable(PodcasterError):
    """An external generation capability (text or audio) failed."""


class LLMError(CapabilityUnavailable):
    """A text-generation call failed or returned nothing usable."""


class AudioError(CapabilityUnavailable):
    """An audio-synthesis call failed or is not configured."""


class PersistenceError(PodcasterError):
    """Base error for record store failures."""


class PersistenceConflict(PersistenceError):
    """A write violated the store's slug uniqueness constraint."""


class PersistenceUnavailable(PersistenceError):
    """The record store could not be reached or rejected the operation."""


class SchemaDrift(PodcasterError):
    """An optional column is missing; resolved by schema evolution."""


class ToolExecutionFailure(PodcasterError):
    """An auto-executable tool raised while running."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        super().__init__(f"{tool_name}: {cause}")
        self.tool_name = tool_name
        self.cause = cause


class InvocationStateError(PodcasterError):
    """A tool invocation was settled after it already reached a terminal state."""
