"""Capability ports and slug synthesis shared by the generation pipelines."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Protocol

from podcaster.pipeline.fallback import FallbackChain, Strategy
from podcaster.podcasts.prompts import slug_messages
from podcaster.podcasts.slugs import derive_slug, slugify
from podcaster.shared.llm import PromptMessage

logger = logging.getLogger(__name__)

_HYPHENATED_RE = re.compile(r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)+")


class TextCapability(Protocol):
    def generate(self, messages: Sequence[PromptMessage], *, label: str = ...) -> str: ...


class AudioCapability(Protocol):
    def synthesize(self, text: str, language: str = ...) -> str: ...


def _normalize_suggestion(raw: str) -> str:
    # Models sometimes wrap the slug in quotes, lead with "Slug:" or add a
    # trailing sentence. Only the first non-blank line is considered.
    lines = [line for line in raw.strip().splitlines() if line.strip()]
    first = lines[0] if lines else ""
    candidate = first.rsplit(":", 1)[-1]
    hyphenated = _HYPHENATED_RE.findall(candidate)
    if hyphenated:
        return slugify(hyphenated[-1])
    return slugify(candidate.strip().strip("`'\""))


def synthesize_slug(text: TextCapability, topic: str) -> str:
    """Ask the model for a slug; derive one from the topic if that fails."""

    def suggested() -> str | None:
        raw = text.generate(slug_messages(topic), label=f"slug-{derive_slug(topic)}")
        return _normalize_suggestion(raw) or None

    outcome = FallbackChain(
        "slug",
        [
            Strategy("suggested", suggested),
            Strategy("derived", lambda: derive_slug(topic)),
        ],
    ).run()
    return outcome.value or derive_slug(topic)
