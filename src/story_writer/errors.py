"""Error types raised by the story generation pipeline.

Every failure of ``ChatCompletionClient.complete`` surfaces as a
``GenerationError`` subclass carrying display-ready text in ``message``.
None of them are retried automatically.
"""

from __future__ import annotations

from enum import Enum


class NetworkErrorKind(str, Enum):
    """Transport failure classes."""
    TIMEOUT = "timeout"
    OTHER = "other"


class GenerationError(Exception):
    """Base class for story generation failures."""

    message = "Story generation failed."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NoCredentialError(GenerationError):
    message = "API key is not set. Add your DeepSeek API key in the settings."


class GenerationInProgressError(GenerationError):
    message = "A story is already being generated. Wait for it to finish."


class NetworkError(GenerationError):
    """Transport failure (DNS, connection reset, timeout)."""

    def __init__(self, kind: NetworkErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        if kind == NetworkErrorKind.TIMEOUT:
            message = (
                "The request timed out. "
                "Check your internet connection and try again."
            )
        else:
            message = "Network error. Check your internet connection."
            if detail:
                message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def is_timeout(self) -> bool:
        return self.kind == NetworkErrorKind.TIMEOUT


class AuthError(GenerationError):
    message = (
        "Authorization failed (401): the API key is invalid or expired. "
        "Check the key in the settings."
    )


class HttpError(GenerationError):
    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"HTTP error: {status}")


class EmptyResponseError(GenerationError):
    message = "The server returned no story."


class DecodeError(GenerationError):
    message = "Could not decode the server response."


class IdGenerationError(GenerationError):
    message = "Could not create a unique id for the new story. Try again."
