from __future__ import annotations

UNKNOWN_FAILURE_MESSAGE = "An unknown error occurred during transcription."


class JimakuError(Exception):
    """Base class for errors surfaced to CLI and UI callers."""


class ConfigurationError(JimakuError):
    """Raised when a required setting (the service credential) is missing."""


class InputReadError(JimakuError):
    """Raised when the audio file or the reference text cannot be read."""


class TranscriptionFailure(JimakuError, RuntimeError):
    """Raised when a transcription attempt fails for any reason."""

    def __init__(self, message: str = UNKNOWN_FAILURE_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class ResponseFormatError(TranscriptionFailure):
    """Raised when the service reply is valid JSON but not an array."""
