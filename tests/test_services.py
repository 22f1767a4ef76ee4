from __future__ import annotations

import json
from pathlib import Path

import pytest

from jimaku.config import Settings
from jimaku.errors import ConfigurationError, InputReadError, TranscriptionFailure
from jimaku.services import JimakuService


def _audio(tmp_path: Path, name: str = "kyoto.mp3") -> Path:
    path = tmp_path / name
    path.write_bytes(b"fake-mp3")
    return path


def test_service_requires_api_key(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        JimakuService(Settings(data_dir=tmp_path, _env_file=None))


def test_transcribe_file_renders_srt(settings, make_backend, sample_segments, tmp_path: Path) -> None:
    backend = make_backend(sample_segments)
    service = JimakuService(settings, backend=backend)

    outcome = service.transcribe_file(_audio(tmp_path))

    assert outcome.source_name == "kyoto.mp3"
    assert outcome.model == "fake-model"
    assert outcome.segment_count == 2
    assert outcome.srt.startswith("1\n00:00:00,520 --> 00:00:02,880\n")
    request = backend.requests[0]
    assert request.audio == b"fake-mp3"
    assert request.mime_type == "audio/mpeg"
    assert request.reference_text is None


def test_transcribe_file_passes_reference_text(settings, make_backend, sample_segments, tmp_path: Path) -> None:
    reference = tmp_path / "ref.txt"
    reference.write_text("京都で、奇跡が起きた。", encoding="utf-8")
    backend = make_backend(sample_segments)

    JimakuService(settings, backend=backend).transcribe_file(_audio(tmp_path), reference_file=reference)

    assert backend.requests[0].reference_text == "京都で、奇跡が起きた。"


def test_unreadable_reference_aborts_before_request(settings, make_backend, tmp_path: Path) -> None:
    reference = tmp_path / "ref.txt"
    reference.write_bytes(b"\xff\xfe\xfa")
    backend = make_backend()

    with pytest.raises(InputReadError):
        JimakuService(settings, backend=backend).transcribe_file(_audio(tmp_path), reference_file=reference)

    assert backend.requests == []


def test_backend_failure_propagates(settings, make_backend, tmp_path: Path) -> None:
    backend = make_backend(error=TranscriptionFailure("Failed to generate transcription: boom"))

    with pytest.raises(TranscriptionFailure, match="boom"):
        JimakuService(settings, backend=backend).transcribe_file(_audio(tmp_path))


def test_export_defaults_to_exports_dir(settings, make_backend, sample_segments, tmp_path: Path) -> None:
    service = JimakuService(settings, backend=make_backend(sample_segments))
    outcome = service.transcribe_file(_audio(tmp_path, "news.clip.m4a"))

    path = service.export(outcome)

    assert path == settings.exports_dir / "news.clip.srt"
    assert path.read_text(encoding="utf-8") == outcome.srt


def test_export_into_directory_and_as_json(settings, make_backend, sample_segments, tmp_path: Path) -> None:
    service = JimakuService(settings, backend=make_backend(sample_segments))
    outcome = service.transcribe_file(_audio(tmp_path))
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    srt_path = service.export(outcome, out_dir)
    json_path = service.export(outcome, out_dir, export_format="json")

    assert srt_path == out_dir / "kyoto.srt"
    assert json_path == out_dir / "kyoto.json"
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert payload["model"] == "fake-model"
    assert [item["index"] for item in payload["segments"]] == [1, 2]


def test_export_rejects_unknown_format(settings, make_backend, tmp_path: Path) -> None:
    service = JimakuService(settings, backend=make_backend())
    outcome = service.transcribe_file(_audio(tmp_path))

    with pytest.raises(ValueError, match="Unsupported export format"):
        service.export(outcome, export_format="vtt")


def test_submit_returns_future(settings, make_backend, sample_segments, tmp_path: Path) -> None:
    service = JimakuService(settings, backend=make_backend(sample_segments))
    try:
        future = service.submit(_audio(tmp_path))
        outcome = future.result(timeout=5)
    finally:
        service.shutdown()

    assert outcome.segment_count == 2


def test_submit_surfaces_failure_through_future(settings, make_backend, tmp_path: Path) -> None:
    service = JimakuService(settings, backend=make_backend(error=TranscriptionFailure("down")))
    try:
        future = service.submit(_audio(tmp_path))
        with pytest.raises(TranscriptionFailure, match="down"):
            future.result(timeout=5)
    finally:
        service.shutdown()
