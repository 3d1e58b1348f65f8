"""Generation pipelines: basic, audio, listing and recommendation."""

from podcaster.pipeline.audio import AudioPodcastResult, AudioStatus, create_audio_podcast
from podcaster.pipeline.basic import BasicPodcastResult, generate_podcast
from podcaster.pipeline.fallback import FallbackChain, StageOutcome, Strategy
from podcaster.pipeline.listing import list_recent_podcasts
from podcaster.pipeline.recommend import recommend_podcast

__all__ = [
    "AudioPodcastResult",
    "AudioStatus",
    "BasicPodcastResult",
    "FallbackChain",
    "StageOutcome",
    "Strategy",
    "create_audio_podcast",
    "generate_podcast",
    "list_recent_podcasts",
    "recommend_podcast",
]
