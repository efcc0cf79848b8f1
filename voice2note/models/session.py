"""Recording session data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..audio.sink import AudioSink

DEFAULT_MIME_TYPE = "audio/webm"


class SessionState(Enum):
    """Externally visible state of the session manager."""
    IDLE = "idle"
    OPEN = "open"


@dataclass
class Session:
    """One start-to-stop recording attempt and its output file."""
    session_id: str
    file_path: Path
    mime_type: str = DEFAULT_MIME_TYPE
    created_at: datetime = field(default_factory=datetime.now)
    sink: Optional["AudioSink"] = field(default=None, repr=False)

    @property
    def is_open(self) -> bool:
        return self.sink is not None and self.sink.is_open

    def to_dict(self):
        return {
            "session_id": self.session_id,
            "file_path": str(self.file_path),
            "mime_type": self.mime_type,
            "created_at": self.created_at.isoformat(),
            "is_open": self.is_open,
        }
