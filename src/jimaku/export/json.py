from __future__ import annotations

import json
from typing import Any, Sequence

from jimaku.export.srt import SRTSegment


def build_payload(source_name: str, model: str, segments: Sequence[SRTSegment]) -> dict[str, Any]:
    return {
        "source": source_name,
        "model": model,
        "segments": [
            {"index": index, "start": item.start, "end": item.end, "text": item.text}
            for index, item in enumerate(segments, start=1)
        ],
    }


def dumps_payload(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)
