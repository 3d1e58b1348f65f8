"""Listing: digest of the most recently generated podcasts."""

from __future__ import annotations

import logging

from podcaster.errors import PersistenceUnavailable
from podcaster.podcasts.prompts import format_created
from podcaster.podcasts.store import PodcastStore

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No podcasts have been generated yet."


def list_recent_podcasts(limit: int, *, store: PodcastStore) -> str:
    """Render up to ``limit`` recent podcasts as a bulleted digest."""
    try:
        records = store.list_recent(limit)
    except PersistenceUnavailable as exc:
        logger.warning("Listing podcasts failed: %s", exc)
        return f"Failed to retrieve podcast list from database. Error: {exc}"

    if not records:
        return EMPTY_MESSAGE

    lines = [f"• {r.topic} - {r.url} (Generated: {format_created(r)})" for r in records]
    return f"{limit} recent podcasts ({len(records)}):\n\n" + "\n".join(lines)
