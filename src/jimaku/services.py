from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from jimaku.asr.base import Segment, TranscriptionBackend, TranscriptRequest
from jimaku.asr.gemini_backend import GeminiBackend
from jimaku.audio.loader import load_audio, load_reference_text
from jimaku.config import Settings, get_settings
from jimaku.export import json as json_export
from jimaku.export.srt import srt_filename, to_srt

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("srt", "json")


@dataclass(slots=True)
class SubtitleOutcome:
    source_name: str
    model: str
    segments: list[Segment]
    srt: str

    @property
    def segment_count(self) -> int:
        return len(self.segments)


class JimakuService:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        backend: TranscriptionBackend | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.backend = backend or GeminiBackend(
            self.settings.require_api_key(),
            model=self.settings.model,
        )
        self._executor: ThreadPoolExecutor | None = None

    def generate_srt(self, request: TranscriptRequest, *, source_name: str = "") -> SubtitleOutcome:
        segments = self.backend.transcribe(request)
        return SubtitleOutcome(
            source_name=source_name,
            model=self.backend.model,
            segments=segments,
            srt=to_srt(segments),
        )

    def transcribe_file(
        self,
        audio_file: Path,
        *,
        reference_file: Path | None = None,
        mime_type: str | None = None,
    ) -> SubtitleOutcome:
        # Both inputs are read before any request goes out.
        audio = load_audio(audio_file, mime_type)
        reference_text = load_reference_text(reference_file) if reference_file is not None else None
        logger.info(
            "Transcribing %s (%s, %d bytes)%s",
            audio.name,
            audio.mime_type,
            len(audio.data),
            " with reference text" if reference_text else "",
        )
        request = TranscriptRequest(
            audio=audio.data,
            mime_type=audio.mime_type,
            reference_text=reference_text,
        )
        return self.generate_srt(request, source_name=audio.name)

    def submit(
        self,
        audio_file: Path,
        *,
        reference_file: Path | None = None,
        mime_type: str | None = None,
    ) -> Future[SubtitleOutcome]:
        """Run `transcribe_file` on a worker thread.

        `Future.cancel()` only succeeds while the job is still queued; a request
        already in flight runs to completion and its result can be ignored.
        """

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.settings.max_workers,
                thread_name_prefix="jimaku",
            )
        return self._executor.submit(
            self.transcribe_file,
            audio_file,
            reference_file=reference_file,
            mime_type=mime_type,
        )

    def export(
        self,
        outcome: SubtitleOutcome,
        destination: Path | None = None,
        *,
        export_format: str = "srt",
    ) -> Path:
        fmt = export_format.lower().strip()
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format. Use: {', '.join(EXPORT_FORMATS)}")

        filename = srt_filename(outcome.source_name)
        if fmt != "srt":
            filename = f"{filename[: -len('.srt')]}.{fmt}"

        if destination is None:
            self.settings.ensure_dirs()
            output_path = self.settings.exports_dir / filename
        elif destination.is_dir():
            output_path = destination / filename
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            output_path = destination

        if fmt == "srt":
            content = outcome.srt
        else:
            payload = json_export.build_payload(outcome.source_name, outcome.model, outcome.segments)
            content = json_export.dumps_payload(payload)

        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote %s export to %s", fmt, output_path)
        return output_path

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
