"""Prompt builders for podcast script, slug, message and recommendation calls."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC

from podcaster.podcasts.models import AccessibilityMode, PodcastRecord
from podcaster.shared.llm import PromptMessage, system, user

FRIENDLY_ASSISTANT = "You are a friendly assistant"

_SCRIPT_OUTPUT_INSTRUCTION = (
    "\n\nOutput ONLY the spoken script. No title card, no speaker labels,"
    " no word count, no commentary about the script."
)

SCRIPT_SYSTEM_PROMPTS: dict[AccessibilityMode, str] = {
    AccessibilityMode.ACCESSIBLE: (
        "You are a podcast scriptwriter producing accessible long-form"
        " episodes for listeners who rely on audio as their primary way"
        " of taking in information.\n\n"
        "Write a complete single-host script of {min_words}-{max_words} words"
        " about the topic. Structure it in clearly signposted sections:\n"
        "- An introduction that says what the episode will cover\n"
        "- Three or four main sections, each opened by saying its name aloud\n"
        "- A recap that restates the key points in plain language\n"
        "- A short closing\n\n"
        "Use short sentences, define any jargon the first time it appears,"
        " and describe anything visual in words."
        + _SCRIPT_OUTPUT_INSTRUCTION
    ),
    AccessibilityMode.STANDARD: (
        "You are a podcast scriptwriter producing short, conversational"
        " episodes.\n\n"
        "Write a single-host script of {min_words}-{max_words} words about the"
        " topic. Open with a hook, cover two or three interesting points in a"
        " relaxed conversational tone, and finish with a one-line sign-off."
        + _SCRIPT_OUTPUT_INSTRUCTION
    ),
}

SCRIPT_WORD_RANGES: dict[AccessibilityMode, tuple[int, int]] = {
    AccessibilityMode.ACCESSIBLE: (600, 750),
    AccessibilityMode.STANDARD: (300, 450),
}

RECOMMENDER_SYSTEM_PROMPT = (
    "You are a helpful podcast recommendation assistant. Based on a user's"
    " mood or category preference and a list of available podcasts,"
    " recommend the best matching podcast(s). Be enthusiastic and explain"
    " why your recommendation fits their mood. Include the full URL in your"
    " response."
)

CURATOR_SYSTEM_PROMPT = (
    "You are an enthusiastic podcast curator who creates personalized,"
    " friendly messages."
)


def script_messages(topic: str, mode: AccessibilityMode) -> list[PromptMessage]:
    """Prompt for the podcast script; accessible mode asks for a longer script."""
    min_words, max_words = SCRIPT_WORD_RANGES[mode]
    prompt = SCRIPT_SYSTEM_PROMPTS[mode].format(min_words=min_words, max_words=max_words)
    return [system(prompt), user(f"Topic: {topic}")]


def slug_messages(topic: str) -> list[PromptMessage]:
    return [
        system(FRIENDLY_ASSISTANT),
        user(
            f"Return only one realistic-looking podcast URL slug about {topic}"
            " and nothing else. Use lowercase letters, digits and hyphens only."
            " Don't quote it"
        ),
    ]


def live_message_messages(topic: str, url: str) -> list[PromptMessage]:
    return [
        system(FRIENDLY_ASSISTANT),
        user(
            f"Return a message about the podcast that was just generated about"
            f" {topic} at {url} and nothing else. "
        ),
    ]


def render_catalog(records: Sequence[PodcastRecord]) -> str:
    """Numbered catalog of records for the recommendation prompt."""
    return "\n".join(
        f'{i}. Topic: "{r.topic}" | URL: {r.url} | Created: {format_created(r)}'
        for i, r in enumerate(records, start=1)
    )


def recommendation_messages(mood: str, records: Sequence[PodcastRecord]) -> list[PromptMessage]:
    return [
        system(RECOMMENDER_SYSTEM_PROMPT),
        user(
            f'User mood/preference: "{mood}"\n\n'
            f"Available podcasts:\n{render_catalog(records)}\n\n"
            "Please recommend the best podcast(s) that match my mood and explain why."
        ),
    ]


def personalize_messages(mood: str, recommendation: str) -> list[PromptMessage]:
    return [
        system(CURATOR_SYSTEM_PROMPT),
        user(
            f"Create a warm, personal message for someone looking for a podcast"
            f' when they\'re feeling "{mood}". Based on this recommendation:'
            f" {recommendation}. Make it sound like you personally chose this for"
            " them and care about their mood. Include some emojis and be encouraging."
        ),
    ]


def match_messages(mood: str, record: PodcastRecord) -> list[PromptMessage]:
    return [
        system(CURATOR_SYSTEM_PROMPT),
        user(
            f'Create a warm, personal message recommending the podcast "{record.topic}"'
            f' at {record.url} for someone feeling "{mood}". Make it encouraging and'
            " personal with emojis."
        ),
    ]


def format_created(record: PodcastRecord) -> str:
    return record.created_at.astimezone(UTC).strftime("%b %d, %Y %I:%M %p UTC")
