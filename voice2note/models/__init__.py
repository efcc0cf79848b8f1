"""Data models for the Voice2Note application."""

from .session import Session, SessionState, DEFAULT_MIME_TYPE
from .transcription import TranscriptionResult
from .events import SignalResponse, RecordingResultEvent

__all__ = [
    "Session",
    "SessionState",
    "DEFAULT_MIME_TYPE",
    "TranscriptionResult",
    "SignalResponse",
    "RecordingResultEvent",
]
