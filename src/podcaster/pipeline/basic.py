"""Basic pipeline: topic → slug → persisted podcast page."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from podcaster.config import PodcasterConfig
from podcaster.errors import PersistenceConflict, PersistenceUnavailable, SchemaDrift
from podcaster.pipeline.common import TextCapability, synthesize_slug
from podcaster.pipeline.fallback import FallbackChain, Strategy
from podcaster.podcasts.models import PodcastRecord
from podcaster.podcasts.prompts import live_message_messages
from podcaster.podcasts.slugs import disambiguate
from podcaster.podcasts.store import PodcastStore

logger = logging.getLogger(__name__)


def live_message(url: str, topic: str) -> str:
    return f"Podcast page is now live at this URL: {url} about {topic}"


@dataclass
class BasicPodcastResult:
    """What the basic pipeline produced.

    ``url`` is the URL shown to the user. On a slug conflict it is the
    URL of the originally suggested slug, not the disambiguated one.
    """

    topic: str
    url: str
    message: str
    record: PodcastRecord | None = None

    @property
    def persisted(self) -> bool:
        return self.record is not None


def generate_podcast(
    topic: str,
    *,
    text: TextCapability,
    store: PodcastStore,
    config: PodcasterConfig,
) -> BasicPodcastResult:
    """Create and persist a podcast page for ``topic``.

    Never raises for capability or store failures: the user always gets a
    message containing a URL.
    """
    slug = synthesize_slug(text, topic)
    original_url = config.podcast_url(slug)

    final_slug = disambiguate(slug, store)
    final_url = config.podcast_url(final_slug)
    record = PodcastRecord(topic=topic, slug=final_slug, url=final_url)

    try:
        store.insert_minimal(record)
    except PersistenceConflict:
        # A concurrent writer took the slug between pre-check and insert.
        logger.info("Duplicate slug detected, returning URL anyway: %s", original_url)
        return BasicPodcastResult(
            topic=topic, url=original_url, message=live_message(original_url, topic)
        )
    except (PersistenceUnavailable, SchemaDrift) as exc:
        logger.warning("Failed to save podcast slug %s: %s", final_slug, exc)
        return BasicPodcastResult(
            topic=topic, url=final_url, message=_unsaved_message(text, topic, final_url)
        )

    return BasicPodcastResult(
        topic=topic, url=final_url, message=live_message(final_url, topic), record=record
    )


def _unsaved_message(text: TextCapability, topic: str, url: str) -> str:
    """Announce the page even though it was not saved."""

    def generated() -> str | None:
        message = text.generate(live_message_messages(topic, url), label="basic-message")
        return message if url in message else None

    outcome = FallbackChain(
        "basic-message",
        [
            Strategy("generated", generated),
            Strategy("static", lambda: live_message(url, topic)),
        ],
    ).run()
    return outcome.value or live_message(url, topic)
