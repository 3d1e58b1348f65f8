"""Slug derivation and single-pass uniqueness disambiguation."""

from __future__ import annotations

import logging
import re
import time
from typing import Protocol

from podcaster.errors import PersistenceUnavailable

logger = logging.getLogger(__name__)

AUDIO_PREFIX = "audio-"
DEFAULT_SLUG = "podcast"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


class SlugLookup(Protocol):
    def exists_by_slug(self, slug: str) -> bool: ...


def now_millis() -> int:
    """Current epoch time in milliseconds."""
    return time.time_ns() // 1_000_000


def slugify(text: str) -> str:
    """Lower-case, replace non-alphanumeric runs with '-', trim hyphens.

    Returns an empty string when nothing alphanumeric remains.
    """
    return _NON_ALNUM_RE.sub("-", text.lower()).strip("-")


def derive_slug(topic: str) -> str:
    """Deterministic slug for a topic, never empty."""
    return slugify(topic) or DEFAULT_SLUG


def with_audio_prefix(slug: str) -> str:
    if slug.startswith(AUDIO_PREFIX):
        return slug
    return f"{AUDIO_PREFIX}{slug}"


def placeholder_slug(topic: str, millis: int | None = None) -> str:
    """Slug used when script synthesis failed and nothing is persisted."""
    stamp = now_millis() if millis is None else millis
    return f"{AUDIO_PREFIX}{derive_slug(topic)}-fallback-{stamp}"


def disambiguate(slug: str, store: SlugLookup) -> str:
    """Append ``-<epoch-ms>`` if ``slug`` is already taken.

    One lookup, no retry loop. A concurrent writer can still claim the
    returned slug first; the store's UNIQUE constraint catches that at
    insert time. If the lookup itself fails the candidate is returned
    unchanged.
    """
    try:
        taken = store.exists_by_slug(slug)
    except PersistenceUnavailable as exc:
        logger.warning("Slug pre-check failed for %s, using candidate: %s", slug, exc)
        return slug

    if not taken:
        return slug

    unique = f"{slug}-{now_millis()}"
    logger.info("Slug %s already exists, using unique slug %s", slug, unique)
    return unique
