from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from jimaku.errors import InputReadError

# Containers the stdlib table does not know on every platform.
_EXTRA_MIME_TYPES: dict[str, str] = {
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".opus": "audio/ogg",
    ".aac": "audio/aac",
    ".weba": "audio/webm",
}


@dataclass(frozen=True, slots=True)
class AudioFile:
    name: str
    data: bytes
    mime_type: str


def guess_mime_type(path: Path) -> str | None:
    suffix = path.suffix.lower()
    if suffix in _EXTRA_MIME_TYPES:
        return _EXTRA_MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed


def load_audio(path: Path, mime_type: str | None = None) -> AudioFile:
    resolved_type = (mime_type or "").strip() or guess_mime_type(path)
    if not resolved_type:
        raise InputReadError(
            f"Cannot determine the MIME type of {path.name}. Pass it explicitly (e.g. audio/mpeg)."
        )
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InputReadError(f"Failed to read the audio file {path}: {exc}") from exc
    if not data:
        raise InputReadError(f"Audio file is empty: {path}")
    return AudioFile(name=path.name, data=data, mime_type=resolved_type)


def load_reference_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputReadError(f"Failed to read the reference text file {path}: {exc}") from exc
