"""Signal and event models exchanged with the host UI."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .transcription import TranscriptionResult


@dataclass
class SignalResponse:
    """Reply to an inbound ``start`` or ``stop`` signal."""
    ok: bool
    file_path: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ok": self.ok, "file_path": self.file_path}
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class RecordingResultEvent:
    """Outbound event pushed once a stopped recording has been processed."""
    file_path: str
    text: Optional[str] = None
    raw: Optional[str] = None
    error: Optional[str] = None
    info: Optional[str] = None

    @classmethod
    def from_result(cls, result: TranscriptionResult) -> "RecordingResultEvent":
        return cls(
            file_path=str(result.file_path),
            text=result.formatted_text,
            raw=result.raw_text,
            error=result.error,
            info=result.info,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "text": self.text,
            "raw": self.raw,
            "error": self.error,
            "info": self.info,
        }
