"""Shared text-generation utilities.

Centralizes all Claude invocations with two backends:
1. Anthropic API (preferred, uses ANTHROPIC_API_KEY)
2. Subprocess ``claude -p`` (fallback when no API key is set)

Callers pass role-tagged prompt messages; the first ``system`` message
becomes the system prompt and the remaining messages form the turn.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence

import anthropic
from pydantic import BaseModel

from podcaster.errors import LLMError

logger = logging.getLogger(__name__)


class PromptMessage(BaseModel):
    """A single role-tagged prompt message."""

    role: str  # "system", "user" or "assistant"
    content: str


def system(content: str) -> PromptMessage:
    return PromptMessage(role="system", content=content)


def user(content: str) -> PromptMessage:
    return PromptMessage(role="user", content=content)


# ---------------------------------------------------------------------------
# Model name mapping
# ---------------------------------------------------------------------------

_MODEL_MAP: dict[str, str] = {
    "sonnet": "claude-sonnet-4-5",
    "haiku": "claude-haiku-4-5",
    "opus": "claude-opus-4-1",
}

_DEFAULT_MODEL = "claude-haiku-4-5"


def _resolve_model(model: str | None) -> str:
    """Resolve a short model name to an API model ID."""
    if model is None:
        return _DEFAULT_MODEL
    return _MODEL_MAP.get(model, model)


def _split_system(messages: Sequence[PromptMessage]) -> tuple[str, list[PromptMessage]]:
    system_parts = [m.content for m in messages if m.role == "system"]
    rest = [m for m in messages if m.role != "system"]
    return "\n\n".join(system_parts), rest


# ---------------------------------------------------------------------------
# Internal: Anthropic API
# ---------------------------------------------------------------------------


def _call_anthropic_api(
    messages: Sequence[PromptMessage],
    *,
    api_key: str,
    model: str | None,
    timeout: int,
    label: str,
) -> str:
    """Call Claude via the Anthropic API."""
    client = anthropic.Anthropic(api_key=api_key, timeout=timeout)
    resolved_model = _resolve_model(model)
    system_prompt, turn = _split_system(messages)

    logger.debug("Calling Anthropic API model=%s (%s)", resolved_model, label)

    kwargs: dict[str, object] = {
        "model": resolved_model,
        "max_tokens": 4096,
        "messages": [{"role": m.role, "content": m.content} for m in turn],
    }
    if system_prompt.strip():
        kwargs["system"] = system_prompt

    response = client.messages.create(**kwargs)  # type: ignore[arg-type]

    text_parts: list[str] = []
    for block in response.content:
        if block.type == "text":
            text_parts.append(block.text)

    return "".join(text_parts).strip()


# ---------------------------------------------------------------------------
# Internal: subprocess fallback
# ---------------------------------------------------------------------------


def _call_subprocess(
    messages: Sequence[PromptMessage],
    *,
    model: str | None,
    timeout: int,
    label: str,
) -> str:
    """Call Claude via subprocess (``claude -p``) fallback."""
    cmd = ["claude", "-p"]
    if model:
        cmd.extend(["--model", model])

    system_prompt, turn = _split_system(messages)
    full_prompt = "\n\n".join([system_prompt, *(m.content for m in turn)]).strip()

    # Filter CLAUDECODE env var to prevent recursive Claude invocations
    env = {k: v for k, v in os.environ.items() if k != "CLAUDECODE"}

    logger.debug("Calling Claude CLI subprocess (%s)", label)

    try:
        result = subprocess.run(
            cmd,
            input=full_prompt,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
    except FileNotFoundError as exc:
        raise LLMError(f"Claude CLI not found on the PATH (label={label})") from exc
    except subprocess.TimeoutExpired as exc:
        raise LLMError(f"Claude CLI timed out after {timeout}s (label={label})") from exc
    except OSError as exc:
        raise LLMError(f"Claude CLI could not be started (label={label}): {exc}") from exc

    if result.returncode != 0:
        raise LLMError(
            f"Claude CLI failed (exit {result.returncode}, label={label}): {result.stderr[:500]}"
        )

    return result.stdout.strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def call_claude(
    messages: Sequence[PromptMessage],
    *,
    model: str | None = None,
    timeout: int = 120,
    label: str = "generation",
) -> str:
    """Call Claude and return the response text.

    Priority order:
    1. Anthropic API (if ANTHROPIC_API_KEY is set, unless PODCASTER_USE_CLI=1)
    2. Subprocess ``claude -p``

    Args:
        messages: Role-tagged prompt messages.
        model: Optional model override (e.g. "sonnet", "haiku").
        timeout: Timeout in seconds.
        label: Label for logging.

    Returns:
        The response text (stripped). May be empty.

    Raises:
        LLMError: On any failure.
    """
    use_cli = os.environ.get("PODCASTER_USE_CLI", "").strip() == "1"
    api_key = os.environ.get("ANTHROPIC_API_KEY", "").strip()

    if api_key and not use_cli:
        try:
            return _call_anthropic_api(
                messages, api_key=api_key, model=model, timeout=timeout, label=label
            )
        except Exception as exc:
            raise LLMError(f"Anthropic API failed (label={label}): {exc}") from exc

    return _call_subprocess(messages, model=model, timeout=timeout, label=label)


class TextGenerator:
    """Text-generation capability bound to a model and timeout."""

    def __init__(self, model: str | None = None, timeout: int = 120) -> None:
        self.model = model
        self.timeout = timeout

    def generate(self, messages: Sequence[PromptMessage], *, label: str = "generation") -> str:
        """Generate text for the prompt messages.

        Raises:
            LLMError: If the underlying call fails.
        """
        return call_claude(messages, model=self.model, timeout=self.timeout, label=label)
