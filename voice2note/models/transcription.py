"""Transcription-related data models."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


@dataclass
class TranscriptionResult:
    """Terminal artifact of a pipeline run.

    Exactly one of ``formatted_text`` and ``error`` is set. ``raw_text`` is kept
    even when formatting failed, in which case ``formatted_text`` falls back to
    it and ``formatting_failed`` is True.
    """
    file_path: Union[str, Path]
    raw_text: Optional[str] = None
    formatted_text: Optional[str] = None
    error: Optional[str] = None
    formatting_failed: bool = False
    info: Optional[str] = None
    stt_provider: Optional[str] = None
    formatting_provider: Optional[str] = None
    processing_time: float = 0.0
    timestamp: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.error is None
