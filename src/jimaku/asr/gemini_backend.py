from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from jimaku.asr.base import Segment, TranscriptRequest
from jimaku.asr.prompts import PromptConfig, build_prompt
from jimaku.errors import (
    UNKNOWN_FAILURE_MESSAGE,
    ConfigurationError,
    ResponseFormatError,
    TranscriptionFailure,
)

logger = logging.getLogger(__name__)

RESPONSE_MIME_TYPE = "application/json"
# 100k hours; keeps millisecond arithmetic in the encoder finite.
MAX_TIMESTAMP_SECONDS = 360_000_000.0


class SegmentPayload(BaseModel):
    """One element of the JSON array returned by the service."""

    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    start: float = Field(ge=0.0, le=MAX_TIMESTAMP_SECONDS)
    end: float = Field(le=MAX_TIMESTAMP_SECONDS)
    text: str

    @model_validator(mode="after")
    def _check_order(self) -> "SegmentPayload":
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) is before start ({self.start})")
        return self


def response_schema(types_module: Any) -> Any:
    """Schema constraining the reply to an array of {start, end, text} objects."""

    schema_type = types_module.Type
    return types_module.Schema(
        type=schema_type.ARRAY,
        items=types_module.Schema(
            type=schema_type.OBJECT,
            properties={
                "start": types_module.Schema(
                    type=schema_type.NUMBER,
                    description="The starting time of the segment in seconds.",
                ),
                "end": types_module.Schema(
                    type=schema_type.NUMBER,
                    description="The ending time of the segment in seconds.",
                ),
                "text": types_module.Schema(
                    type=schema_type.STRING,
                    description="The transcribed text of the segment.",
                ),
            },
            required=["start", "end", "text"],
        ),
    )


def parse_segments(payload: str | None) -> list[Segment]:
    if payload is None or not payload.strip():
        raise TranscriptionFailure("Failed to generate transcription: the service returned no text.")
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TranscriptionFailure(
            f"Failed to generate transcription: response is not valid JSON ({exc.msg})."
        ) from exc

    if not isinstance(data, list):
        raise ResponseFormatError("API response is not a valid array.")

    segments: list[Segment] = []
    for index, item in enumerate(data):
        try:
            parsed = SegmentPayload.model_validate(item)
        except ValidationError as exc:
            raise TranscriptionFailure(
                f"Failed to generate transcription: segment {index} is malformed: {exc}"
            ) from exc
        text = parsed.text.strip()
        if not text:
            logger.warning("Dropping segment %d with empty text (%.3f-%.3f)", index, parsed.start, parsed.end)
            continue
        segments.append(Segment(start=parsed.start, end=parsed.end, text=text))
    return segments


def failure_from_exception(exc: BaseException) -> TranscriptionFailure:
    message = getattr(exc, "message", None) or str(exc)
    if not isinstance(message, str) or not message.strip():
        return TranscriptionFailure(UNKNOWN_FAILURE_MESSAGE)
    return TranscriptionFailure(f"Failed to generate transcription: {message}")


class GeminiBackend:
    """Transcription backend that delegates to the Gemini API through google-genai."""

    def __init__(self, api_key: str | None, *, model: str, client: Any | None = None) -> None:
        if client is None and not (api_key and api_key.strip()):
            raise ConfigurationError("Gemini API key is not set.")
        self.api_key = api_key
        self.model = model
        self._client = client

    @staticmethod
    def _genai_modules():
        from google import genai
        from google.genai import types

        return genai, types

    def _get_client(self):
        if self._client is None:
            genai, _ = self._genai_modules()
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def build_request(self, request: TranscriptRequest) -> tuple[Any, Any]:
        """Return the `(contents, config)` pair passed to `generate_content`."""

        _, types = self._genai_modules()
        prompt = build_prompt(PromptConfig.for_reference(request.reference_text))
        contents = types.Content(
            role="user",
            parts=[
                types.Part.from_bytes(data=request.audio, mime_type=request.mime_type),
                types.Part.from_text(text=prompt),
            ],
        )
        config = types.GenerateContentConfig(
            response_mime_type=RESPONSE_MIME_TYPE,
            response_schema=response_schema(types),
        )
        return contents, config

    def transcribe(self, request: TranscriptRequest) -> list[Segment]:
        contents, config = self.build_request(request)
        logger.debug(
            "Sending %d bytes of %s to %s (reference=%s)",
            len(request.audio),
            request.mime_type,
            self.model,
            request.has_reference,
        )
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.debug("Gemini request failed", exc_info=True)
            raise failure_from_exception(exc) from exc
        return self._decode(response)

    async def atranscribe(self, request: TranscriptRequest) -> list[Segment]:
        contents, config = self.build_request(request)
        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.debug("Gemini request failed", exc_info=True)
            raise failure_from_exception(exc) from exc
        return self._decode(response)

    def _decode(self, response: Any) -> list[Segment]:
        segments = parse_segments(getattr(response, "text", None))
        logger.info("Gemini returned %d segments", len(segments))
        return segments
