"""Podcast domain: records, slugs, prompts and the record store."""

from podcaster.podcasts.models import AccessibilityMode, PodcastRecord
from podcaster.podcasts.store import PodcastStore

__all__ = [
    "AccessibilityMode",
    "PodcastRecord",
    "PodcastStore",
]
