"""Speech synthesis for audio podcasts.

Uses Google Gemini's text-to-speech capability via the google-genai SDK.
The synthesized PCM payload is returned base64-encoded so it can be
stored alongside the podcast record.
"""

from __future__ import annotations

import base64
import logging
import os

from google import genai
from google.genai import types

from podcaster.errors import AudioError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"

# Gemini TTS expects BCP-47 codes; bare tags are widened to a default region.
_LANGUAGE_CODES: dict[str, str] = {
    "en": "en-US",
    "es": "es-US",
    "fr": "fr-FR",
    "de": "de-DE",
    "ja": "ja-JP",
}


def language_code(language: str) -> str:
    return _LANGUAGE_CODES.get(language.lower(), language)


class AudioGenerator:
    """Generate spoken audio for podcast scripts via Google Gemini."""

    def __init__(self, model: str | None = None, voice: str | None = None) -> None:
        self.model = model or os.environ.get("PODCASTER_AUDIO_MODEL", DEFAULT_MODEL)
        self.voice = voice or DEFAULT_VOICE
        self._client: genai.Client | None = None

    def is_configured(self) -> bool:
        """Check whether speech synthesis has an API key."""
        return bool(os.environ.get("GOOGLE_AI_API_KEY"))

    def _get_client(self) -> genai.Client:
        """Lazy-create and cache the genai Client."""
        if self._client is None:
            self._client = genai.Client(api_key=os.environ["GOOGLE_AI_API_KEY"])
        return self._client

    def synthesize(self, text: str, language: str = "en") -> str:
        """Synthesize speech for ``text`` and return it base64-encoded.

        Args:
            text: Cleaned script text to speak.
            language: Language tag (e.g. "en" or "en-US").

        Returns:
            Base64-encoded audio payload.

        Raises:
            AudioError: If synthesis is not configured, fails, or returns
                no audio data.
        """
        if not self.is_configured():
            raise AudioError("Audio synthesis not configured (GOOGLE_AI_API_KEY unset)")
        if not text.strip():
            raise AudioError("Refusing to synthesize empty text")

        try:
            client = self._get_client()
            response = client.models.generate_content(
                model=self.model,
                contents=text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        language_code=language_code(language),
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(
                                voice_name=self.voice,
                            ),
                        ),
                    ),
                ),
            )
        except Exception as exc:
            raise AudioError(f"Speech synthesis failed: {exc}") from exc

        for part in response.parts or []:
            if part.inline_data is not None and part.inline_data.data:
                logger.info("Synthesized %d bytes of audio", len(part.inline_data.data))
                return base64.b64encode(part.inline_data.data).decode("ascii")

        raise AudioError("No audio data in speech synthesis response")
