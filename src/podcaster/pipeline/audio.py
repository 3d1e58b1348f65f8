"""Audio pipeline: topic → script → speech → slug → persisted record.

Each stage has its own failure domain:

1. Script synthesis failure is fatal: a placeholder URL is returned and
   nothing is persisted.
2. Speech synthesis is best-effort: on failure the episode is text-only.
3. Slug synthesis falls back to a slug derived from the topic.
4. Disambiguation is a single advisory pre-check.
5. Persistence tries a full insert, then a minimal one, then gives up.
6. The response wording reflects which stages succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from podcaster.config import PodcasterConfig
from podcaster.errors import PersistenceUnavailable
from podcaster.pipeline.common import AudioCapability, TextCapability, synthesize_slug
from podcaster.pipeline.fallback import FallbackChain, Strategy
from podcaster.podcasts.models import AccessibilityMode, PodcastRecord
from podcaster.podcasts.prompts import script_messages
from podcaster.podcasts.script import clean_script_for_speech
from podcaster.podcasts.slugs import disambiguate, placeholder_slug, with_audio_prefix
from podcaster.podcasts.store import PodcastStore

logger = logging.getLogger(__name__)

TOPIC_PREFIXES: dict[AccessibilityMode, str] = {
    AccessibilityMode.ACCESSIBLE: "Accessible",
    AccessibilityMode.STANDARD: "Audio",
}


class AudioStatus(StrEnum):
    """Which stages of the audio pipeline produced output."""

    COMPLETE = "complete"
    TEXT_ONLY = "text_only"
    PLACEHOLDER = "placeholder"


@dataclass
class AudioPodcastResult:
    topic: str
    mode: AccessibilityMode
    slug: str
    url: str
    script: str | None = None
    audio: str | None = None
    persisted_with: str | None = None  # "full", "minimal" or None
    record: PodcastRecord | None = None

    @property
    def status(self) -> AudioStatus:
        if self.script is None:
            return AudioStatus.PLACEHOLDER
        if self.audio is None:
            return AudioStatus.TEXT_ONLY
        return AudioStatus.COMPLETE

    @property
    def message(self) -> str:
        return compose_message(self)


def persisted_topic(topic: str, mode: AccessibilityMode) -> str:
    return f"{TOPIC_PREFIXES[mode]}: {topic}"


def compose_message(result: AudioPodcastResult) -> str:
    """User-facing text for each combination of stage outcomes."""
    kind = "accessible" if result.mode is AccessibilityMode.ACCESSIBLE else "audio"

    match result.status:
        case AudioStatus.PLACEHOLDER:
            return (
                f"I encountered issues generating the podcast about {result.topic}, "
                f"so no script or audio could be produced right now. A placeholder "
                f"page was reserved at {result.url}. Please try again in a little while."
            )
        case AudioStatus.TEXT_ONLY:
            message = (
                f"📝 Your {kind} podcast about {result.topic} has a script, but audio "
                f"generation failed, so only a text-only version is available at "
                f"{result.url}."
            )
        case AudioStatus.COMPLETE:
            words = len((result.script or "").split())
            message = (
                f"🎧 Your {kind} podcast about {result.topic} is ready! Listen at "
                f"{result.url} (MP3 audio plus a {words}-word script)."
            )

    if result.persisted_with is None:
        message += " Note: it could not be saved, so it won't show up in recent podcasts."
    return message


def create_audio_podcast(
    topic: str,
    mode: AccessibilityMode,
    *,
    text: TextCapability,
    audio: AudioCapability,
    store: PodcastStore,
    config: PodcasterConfig,
) -> AudioPodcastResult:
    """Run the full audio pipeline for ``topic``.

    Never raises for capability or store failures.
    """
    # 1. Script
    script = FallbackChain(
        "script",
        [
            Strategy(
                "generated",
                lambda: text.generate(script_messages(topic, mode), label=f"script-{mode}"),
            )
        ],
    ).run()
    if not script.ok:
        slug = placeholder_slug(topic)
        logger.warning("Script synthesis failed for %s, returning placeholder %s", topic, slug)
        return AudioPodcastResult(topic=topic, mode=mode, slug=slug, url=config.podcast_url(slug))

    script_text = script.value or ""

    # 2. Speech (best effort)
    cleaned = clean_script_for_speech(script_text)
    speech = FallbackChain(
        "speech",
        [Strategy("synthesized", lambda: audio.synthesize(cleaned, config.podcasts.language))],
    ).run()
    if not speech.ok:
        logger.warning("Audio synthesis failed for %s, continuing text-only", topic)

    # 3. + 4. Slug
    slug = disambiguate(with_audio_prefix(synthesize_slug(text, topic)), store)
    result = AudioPodcastResult(
        topic=topic,
        mode=mode,
        slug=slug,
        url=config.podcast_url(slug),
        script=script_text,
        audio=speech.value,
    )

    # 5. Persistence
    _persist(result, store)
    return result


def _persist(result: AudioPodcastResult, store: PodcastStore) -> None:
    try:
        store.evolve_schema()
    except PersistenceUnavailable as exc:
        logger.warning("Schema evolution failed, attempting insert anyway: %s", exc)

    record = PodcastRecord(
        topic=persisted_topic(result.topic, result.mode),
        slug=result.slug,
        url=result.url,
        script=result.script,
        audio=result.audio,
    )

    def full() -> str:
        store.insert(record)
        return "full"

    def minimal() -> str:
        store.insert_minimal(record)
        return "minimal"

    outcome = FallbackChain(
        "persist", [Strategy("full", full), Strategy("minimal", minimal)]
    ).run()
    if not outcome.ok:
        logger.error("Podcast %s was not persisted: %s", result.slug, "; ".join(outcome.errors))
        return

    result.persisted_with = outcome.value
    if outcome.used("minimal"):
        record = record.model_copy(update={"script": None, "audio": None})
    result.record = record
