"""Built-in tools: weather, local time, scheduling and the podcast pipelines."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field

from podcaster.agent.context import ToolContext
from podcaster.agent.scheduler import TriggerType, schedule_operation
from podcaster.agent.tools import ToolRegistry, ToolSpec
from podcaster.pipeline.audio import create_audio_podcast
from podcaster.pipeline.basic import generate_podcast
from podcaster.pipeline.listing import list_recent_podcasts
from podcaster.pipeline.recommend import recommend_podcast
from podcaster.podcasts.models import AccessibilityMode

logger = logging.getLogger(__name__)

TIME_FORMAT = "%A, %B %d, %Y %I:%M %p %Z"


# ── Parameter models ─────────────────────────────────────────────


class WeatherParams(BaseModel):
    city: str = Field(description="The city to get the weather for")


class LocalTimeParams(BaseModel):
    location: str = Field(description="IANA time zone name, e.g. Europe/Paris")


class ScheduleParams(BaseModel):
    type: TriggerType = Field(description="scheduled (absolute), delayed (seconds) or cron")
    when: int | str = Field(
        description="ISO datetime or epoch seconds, delay in seconds, or a 5-field cron pattern"
    )
    payload: str = Field(description="Message replayed into the conversation when it fires")


class GeneratePodcastParams(BaseModel):
    topic: str = Field(description="What the podcast is about")


class AudioPodcastParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str = Field(description="What the podcast is about")
    accessibility_mode: str | None = Field(
        default=None,
        alias="accessibilityMode",
        description='"accessible" for a longer, structured script; anything else is standard',
    )


class ListRecentParams(BaseModel):
    limit: int | None = Field(default=None, ge=1, description="How many podcasts to list")


class RecommendParams(BaseModel):
    mood: str = Field(description="The listener's mood or preferred category")


# ── Executions ───────────────────────────────────────────────────


def weather(params: WeatherParams, ctx: ToolContext) -> str:
    return f"The weather in {params.city} is sunny"


def local_time(params: LocalTimeParams, ctx: ToolContext) -> str:
    key = params.location.strip().replace(" ", "_")
    try:
        zone = ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        now = datetime.now(tz=UTC)
        return (
            f"I don't know the time zone for {params.location}. "
            f"The current UTC time is {now.strftime(TIME_FORMAT)}."
        )
    return f"The current time in {params.location} is {datetime.now(tz=zone).strftime(TIME_FORMAT)}."


def schedule(params: ScheduleParams, ctx: ToolContext) -> str:
    return schedule_operation(ctx, params.type, params.when, params.payload)


def podcast(params: GeneratePodcastParams, ctx: ToolContext) -> str:
    result = generate_podcast(params.topic, text=ctx.text, store=ctx.store, config=ctx.config)
    if result.record is not None:
        ctx.session.state.record_podcast(result.record)
    return result.message


def audio_podcast(params: AudioPodcastParams, ctx: ToolContext) -> str:
    result = create_audio_podcast(
        params.topic,
        AccessibilityMode.parse(params.accessibility_mode),
        text=ctx.text,
        audio=ctx.audio,
        store=ctx.store,
        config=ctx.config,
    )
    if result.record is not None:
        ctx.session.state.record_podcast(result.record)
    return result.message


def recent(params: ListRecentParams, ctx: ToolContext) -> str:
    limit = params.limit or ctx.config.podcasts.default_list_limit
    return list_recent_podcasts(limit, store=ctx.store)


def recommend(params: RecommendParams, ctx: ToolContext) -> str:
    return recommend_podcast(params.mood, text=ctx.text, store=ctx.store)


# ── Registry ─────────────────────────────────────────────────────


def build_default_registry() -> ToolRegistry:
    """Registry with every built-in tool. Weather lookups need confirmation."""
    registry = ToolRegistry()
    specs = [
        ToolSpec.declare("weather-lookup", "Show the weather in a given city to the user", WeatherParams),
        ToolSpec.declare(
            "local-time", "Get the current local time for a time zone", LocalTimeParams, local_time
        ),
        ToolSpec.declare(
            "schedule-operation",
            "Schedule a message to be replayed into this conversation later",
            ScheduleParams,
            schedule,
        ),
        ToolSpec.declare(
            "generate-podcast",
            "Generate a podcast page for a topic and return its URL",
            GeneratePodcastParams,
            podcast,
        ),
        ToolSpec.declare(
            "create-audio-podcast",
            "Write a podcast script, narrate it, and publish it at a URL",
            AudioPodcastParams,
            audio_podcast,
        ),
        ToolSpec.declare(
            "list-recent", "List the most recently generated podcasts", ListRecentParams, recent
        ),
        ToolSpec.declare(
            "recommend",
            "Recommend a generated podcast that matches the user's mood",
            RecommendParams,
            recommend,
        ),
    ]
    for spec in specs:
        registry.register(spec)
    registry.register_execution("weather-lookup", weather)
    return registry
