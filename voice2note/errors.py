"""Exception hierarchy for Voice2Note."""

from typing import Optional


class Voice2NoteError(Exception):
    """Base class for all Voice2Note errors."""


class ConfigError(Voice2NoteError):
    """Raised when configuration is missing or unusable (detected pre-flight)."""


class RecordingIOError(Voice2NoteError, OSError):
    """Raised when the recording sink cannot be created, written or closed."""


class ProviderError(Voice2NoteError):
    """Raised when a provider backend responds with a non-success status.

    Transport failures (connection refused, timeouts) are reported with
    ``status=None``.
    """

    def __init__(self, provider: str, status: Optional[int], body: str):
        self.provider = provider
        self.status = status
        self.body = body
        super().__init__(f"{provider} API error: {status} - {body}")


class PipelineError(Voice2NoteError):
    """Raised when the speech-to-text stage fails and no transcript exists."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
