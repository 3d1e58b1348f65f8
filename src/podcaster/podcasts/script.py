"""Script cleanup before speech synthesis."""

from __future__ import annotations

import re

_STAGE_DIRECTION_RE = re.compile(r"\[[^\]]*\]")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def clean_script_for_speech(script: str) -> str:
    """Strip bracketed stage directions and collapse repeated blank lines.

    ``[MUSIC FADES IN]`` and similar cues would otherwise be read aloud.
    """
    text = _STAGE_DIRECTION_RE.sub("", script)
    text = _TRAILING_SPACE_RE.sub("\n", text)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()
