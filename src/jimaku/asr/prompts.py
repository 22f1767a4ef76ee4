from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

REFERENCE_START_MARKER = "--- REFERENCE TEXT START ---"
REFERENCE_END_MARKER = "--- REFERENCE TEXT END ---"

# Imperial family names the service tends to mis-transcribe.
PROPER_NOUNS: tuple[str, ...] = (
    "秋篠宮様",
    "紀子様",
    "悠仁様",
    "佳子様",
    "眞子様",
    "美智子様",
    "雅子様",
    "愛子様",
    "徳仁天皇",
    "久子様",
    "信子様",
)

_PROPER_NOUN_NOTES: dict[str, str] = {
    "雅子様": 'This is the correct kanji for Empress Masako. Do NOT use "正子様".',
}

_OUTPUT_FORMAT = """\
**OUTPUT FORMAT:**
The output must be a valid JSON array of objects. Each object represents a subtitle segment and must contain exactly three properties:
1. "start": The starting time of the segment in seconds (number).
2. "end": The ending time of the segment in seconds (number).
3. "text": The transcribed text for that segment (string){text_note}.
Segments must be listed in the order they are spoken."""

_EXAMPLE = """\
**EXAMPLE FORMAT:**
[
  { "start": 0.52, "end": 2.88, "text": "京都で、奇跡が起きた。" },
  { "start": 3.1, "end": 5.4, "text": "天皇陛下と雅子さまが姿を現した瞬間、雨が止まった。" }
]"""

_WITH_REFERENCE_INTRO = """\
You are an expert audio transcriptionist specializing in Japanese. Your task is to transcribe the provided audio and generate accurate, synchronized subtitles.

**CRITICAL INSTRUCTION:** You have been given a reference text. You MUST use this text to ensure the transcription is as accurate as possible. Align the audio transcription with the provided text, correcting any misheard words, names, or phrases to match the reference text. The final transcription's wording MUST match the reference text."""

_WITHOUT_REFERENCE_INTRO = """\
You are an expert audio transcriptionist, particularly for the Japanese language. Your task is to transcribe the provided audio file into text and provide accurate timestamps for each segment."""

_PROPER_NOUNS_INTRO = """\
**IMPORTANT:** You must ensure the following names are transcribed correctly. Pay close attention to these specific names and correct any potential mis-transcriptions in the audio:"""


class PromptMode(str, Enum):
    WITH_REFERENCE = "with_reference"
    WITHOUT_REFERENCE = "without_reference"


@dataclass(frozen=True, slots=True)
class PromptConfig:
    mode: PromptMode
    reference_text: str | None = None

    @classmethod
    def for_reference(cls, reference_text: str | None) -> "PromptConfig":
        if reference_text and reference_text.strip():
            return cls(PromptMode.WITH_REFERENCE, reference_text)
        return cls(PromptMode.WITHOUT_REFERENCE)


def _proper_noun_lines() -> list[str]:
    lines = []
    for name in PROPER_NOUNS:
        note = _PROPER_NOUN_NOTES.get(name)
        lines.append(f"- {name} ({note})" if note else f"- {name}")
    return lines


def build_prompt(config: PromptConfig) -> str:
    """Render the instruction text sent alongside the audio part."""

    if config.mode is PromptMode.WITH_REFERENCE:
        if not config.reference_text or not config.reference_text.strip():
            raise ValueError("Reference mode requires a non-empty reference text.")
        sections = [
            _WITH_REFERENCE_INTRO,
            "\n".join([REFERENCE_START_MARKER, config.reference_text, REFERENCE_END_MARKER]),
            _OUTPUT_FORMAT.format(text_note=", corrected according to the reference text"),
            _EXAMPLE,
        ]
    else:
        sections = [
            _WITHOUT_REFERENCE_INTRO,
            _OUTPUT_FORMAT.format(text_note=""),
            "\n".join([_PROPER_NOUNS_INTRO, *_proper_noun_lines()]),
            _EXAMPLE,
        ]
    return "\n\n".join(sections) + "\n"
