"""Podcast domain models: pure Pydantic v2 data types."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class AccessibilityMode(StrEnum):
    """Script length/format requested for an audio podcast."""

    STANDARD = "standard"
    ACCESSIBLE = "accessible"

    @classmethod
    def parse(cls, value: str | None) -> AccessibilityMode:
        """Anything other than "accessible" means the standard format."""
        if value and value.strip().lower() == cls.ACCESSIBLE:
            return cls.ACCESSIBLE
        return cls.STANDARD


class PodcastRecord(BaseModel):
    """A generated podcast page.

    ``topic``, ``slug`` and ``url`` are always present; ``script`` and
    ``audio`` are only set when the audio pipeline produced them.
    """

    topic: str
    slug: str
    url: str
    script: str | None = None
    audio: str | None = None  # base64 payload
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))
