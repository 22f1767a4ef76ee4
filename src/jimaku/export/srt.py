from __future__ import annotations

import re
from pathlib import PurePath
from typing import Protocol, Sequence

DEFAULT_STEM = "subtitles"

_BLANK_LINES = re.compile(r"\n\s*\n")


class SRTSegment(Protocol):
    start: float
    end: float
    text: str


def format_timestamp(seconds: float) -> str:
    # Milliseconds are rounded half up before splitting so 59.9996 carries to 00:01:00,000.
    total_ms = int(max(seconds, 0.0) * 1000.0 + 0.5)
    hours = total_ms // 3_600_000
    total_ms %= 3_600_000
    minutes = total_ms // 60_000
    total_ms %= 60_000
    secs = total_ms // 1000
    millis = total_ms % 1000
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def to_srt(segments: Sequence[SRTSegment]) -> str:
    """Build an SRT string from timestamped segments.

    Blocks are numbered from 1 in input order and separated by one blank line.
    An empty sequence yields an empty string.
    """

    if not segments:
        return ""
    lines: list[str] = []
    for index, segment in enumerate(segments, start=1):
        lines.append(str(index))
        lines.append(f"{format_timestamp(segment.start)} --> {format_timestamp(segment.end)}")
        # A blank line inside the text would end the block early.
        lines.append(_BLANK_LINES.sub("\n", segment.text.strip()))
        lines.append("")
    return "\n".join(lines).strip() + "\n"


def srt_filename(audio_name: str) -> str:
    stem = PurePath(audio_name).name
    if "." in stem:
        stem = stem.rsplit(".", 1)[0]
    return f"{stem or DEFAULT_STEM}.srt"
