from __future__ import annotations

from pathlib import Path

import pytest

from jimaku.asr.base import Segment, TranscriptRequest
from jimaku.config import API_KEY_ENV_VARS, Settings


class FakeBackend:
    def __init__(self, segments: list[Segment] | None = None, error: Exception | None = None) -> None:
        self.model = "fake-model"
        self.segments = segments or []
        self.error = error
        self.requests: list[TranscriptRequest] = []

    def transcribe(self, request: TranscriptRequest) -> list[Segment]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return list(self.segments)

    async def atranscribe(self, request: TranscriptRequest) -> list[Segment]:
        return self.transcribe(request)


@pytest.fixture(autouse=True)
def _clear_api_key_env(monkeypatch) -> None:
    for name in API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(api_key="test-key", data_dir=tmp_path / "data", _env_file=None)


@pytest.fixture
def sample_segments() -> list[Segment]:
    return [
        Segment(start=0.52, end=2.88, text="京都で、奇跡が起きた。"),
        Segment(start=3.1, end=5.4, text="天皇陛下と雅子さまが姿を現した瞬間、雨が止まった。"),
    ]


@pytest.fixture
def make_backend():
    return FakeBackend
