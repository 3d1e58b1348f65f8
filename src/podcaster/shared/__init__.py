"""Shared external capabilities: text generation and speech synthesis."""

from podcaster.shared.audio import AudioGenerator
from podcaster.shared.llm import PromptMessage, TextGenerator, call_claude

__all__ = [
    "AudioGenerator",
    "PromptMessage",
    "TextGenerator",
    "call_claude",
]
