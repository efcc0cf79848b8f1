"""Services layer for Voice2Note application logic."""

from .recording_service import RecordingService
from .session_manager import RecordingSessionManager

__all__ = [
    "RecordingService",
    "RecordingSessionManager",
]
