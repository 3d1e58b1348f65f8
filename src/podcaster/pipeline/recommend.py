"""Recommendation pipeline: mood → matching podcast from the catalog.

Strategies, richest first:

1. ``ai``: the model picks from the catalog, then a second call rephrases
   the pick warmly. The raw pick is used if the rephrasing fails.
2. ``keyword``: the first record whose topic contains any word of the
   mood, announced with a personalized message or a fixed template.
"""

from __future__ import annotations

import logging

from podcaster.errors import PersistenceUnavailable
from podcaster.pipeline.common import TextCapability
from podcaster.pipeline.fallback import FallbackChain, Strategy
from podcaster.podcasts.models import PodcastRecord
from podcaster.podcasts.prompts import (
    format_created,
    match_messages,
    personalize_messages,
    recommendation_messages,
)
from podcaster.podcasts.store import PodcastStore

logger = logging.getLogger(__name__)

NO_PODCASTS_MESSAGE = (
    "No podcasts have been generated yet. Generate some podcasts first to get recommendations!"
)


def no_match_message(mood: str) -> str:
    return (
        f'😔 No podcasts found matching "{mood}". Try generating some podcasts with '
        "topics you're interested in first!"
    )


def match_template(mood: str, record: PodcastRecord) -> str:
    return (
        f'🎯 Found a matching podcast!\n\n"{record.topic}"\n'
        f"📅 Generated: {format_created(record)}\n"
        f"🔗 Listen here: {record.url}\n\n"
        f"This podcast matches your mood for: {mood}"
    )


def keyword_match(mood: str, records: list[PodcastRecord]) -> PodcastRecord | None:
    """First record whose topic contains any whitespace-separated word of ``mood``."""
    keywords = mood.lower().split()
    for record in records:
        topic = record.topic.lower()
        if any(keyword in topic for keyword in keywords):
            return record
    return None


def recommend_podcast(mood: str, *, text: TextCapability, store: PodcastStore) -> str:
    """Recommend a stored podcast for ``mood``. Always returns text."""
    try:
        records = store.list_all()
    except PersistenceUnavailable as exc:
        logger.warning("Loading podcasts for recommendation failed: %s", exc)
        return f"Failed to get recommendations. Error: {exc}"

    if not records:
        return NO_PODCASTS_MESSAGE

    outcome = FallbackChain(
        "recommend",
        [
            Strategy("ai", lambda: _ai_recommendation(text, mood, records)),
            Strategy("keyword", lambda: _keyword_recommendation(text, mood, records)),
        ],
    ).run()
    return outcome.value or no_match_message(mood)


def _ai_recommendation(text: TextCapability, mood: str, records: list[PodcastRecord]) -> str | None:
    pick = text.generate(recommendation_messages(mood, records), label="recommend").strip()
    if not pick:
        return None

    outcome = FallbackChain(
        "recommend-personalize",
        [
            Strategy(
                "personalized",
                lambda: text.generate(personalize_messages(mood, pick), label="personalize"),
            ),
            Strategy("raw", lambda: f"🎧 Podcast Recommendation:\n\n{pick}"),
        ],
    ).run()
    return outcome.value


def _keyword_recommendation(text: TextCapability, mood: str, records: list[PodcastRecord]) -> str:
    record = keyword_match(mood, records)
    if record is None:
        logger.info("No keyword match for mood %r among %d podcasts", mood, len(records))
        return no_match_message(mood)

    outcome = FallbackChain(
        "recommend-match",
        [
            Strategy(
                "personalized",
                lambda: text.generate(match_messages(mood, record), label="match"),
            ),
            Strategy("template", lambda: match_template(mood, record)),
        ],
    ).run()
    return outcome.value or match_template(mood, record)
