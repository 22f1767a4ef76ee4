from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Segment:
    start: float
    end: float
    text: str


@dataclass(frozen=True, slots=True)
class TranscriptRequest:
    audio: bytes
    mime_type: str
    reference_text: str | None = None

    @property
    def has_reference(self) -> bool:
        return bool(self.reference_text and self.reference_text.strip())


class TranscriptionBackend(Protocol):
    model: str

    def transcribe(self, request: TranscriptRequest) -> list[Segment]:
        """Transcribe one audio payload into ordered, timestamped segments."""

    async def atranscribe(self, request: TranscriptRequest) -> list[Segment]:
        """Awaitable variant of `transcribe`; cancel the awaiting task to abandon it."""
