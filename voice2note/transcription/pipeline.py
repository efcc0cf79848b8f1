"""Transcription pipeline: finalized recording -> raw transcript -> formatted text."""

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Union

from .base import AbstractProviderBackend
from .selector import ProviderSelector
from ..errors import ConfigError, PipelineError, ProviderError
from ..models.session import DEFAULT_MIME_TYPE
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


class TranscriptionPipeline:
    """Runs speech-to-text then formatting on one finalized recording.

    Every call is single-attempt. A failed transcription yields an error
    result with no text; a failed formatting pass yields the raw transcript
    as the formatted text with ``formatting_failed`` set.
    """

    def __init__(self, stt_backend: AbstractProviderBackend, formatter: AbstractProviderBackend):
        """Initialize pipeline.

        Args:
            stt_backend: Backend used for the speech-to-text stage
            formatter: Backend used for the formatting stage
        """
        self.stt_backend = stt_backend
        self.formatter = formatter
        logger.info(f"TranscriptionPipeline initialized: stt={stt_backend.provider_name}, "
                    f"formatting={formatter.provider_name}")

    @classmethod
    def from_selector(cls, selector: ProviderSelector) -> "TranscriptionPipeline":
        return cls(selector.speech_to_text(), selector.formatter())

    async def run(self, file_path: Union[str, Path], mime_type: str = DEFAULT_MIME_TYPE) -> TranscriptionResult:
        """Transcribe and format a finalized recording.

        Args:
            file_path: Closed recording file
            mime_type: Declared content type of the recording

        Returns:
            TranscriptionResult; failures are reported in it, never raised
        """
        start_time = time.time()
        result = TranscriptionResult(
            file_path=str(file_path),
            stt_provider=self.stt_backend.provider_name,
            formatting_provider=self.formatter.provider_name,
        )

        try:
            raw_text = await self._transcribe(Path(file_path), mime_type or DEFAULT_MIME_TYPE)
        except (PipelineError, ConfigError, OSError) as e:
            logger.error(f"Transcription failed for {file_path}: {e}")
            result.error = str(e)
            return self._finish(result, start_time)

        result.raw_text = raw_text
        if not raw_text.strip():
            logger.info(f"Empty transcript for {file_path}, skipping formatting")
            result.formatted_text = raw_text
            return self._finish(result, start_time)

        try:
            result.formatted_text = await self.formatter.format(raw_text)
        except (ProviderError, ConfigError) as e:
            logger.warning(f"Formatting failed for {file_path}, using raw transcript: {e}")
            result.formatted_text = raw_text
            result.formatting_failed = True
            result.info = f"Formatting failed, showing raw transcript: {e}"

        return self._finish(result, start_time)

    async def _transcribe(self, file_path: Path, mime_type: str) -> str:
        loop = asyncio.get_running_loop()
        audio_bytes = await loop.run_in_executor(None, file_path.read_bytes)
        logger.info(f"Read {len(audio_bytes)} bytes from {file_path}")

        if not audio_bytes:
            return ""

        try:
            return await self.stt_backend.transcribe(audio_bytes, mime_type)
        except ProviderError as e:
            raise PipelineError(f"Speech-to-text failed: {e}", cause=e) from e

    def _finish(self, result: TranscriptionResult, start_time: float) -> TranscriptionResult:
        result.processing_time = time.time() - start_time
        result.timestamp = datetime.now()
        logger.info(f"Pipeline finished for {result.file_path} in {result.processing_time:.2f}s "
                    f"(ok={result.ok}, formatting_failed={result.formatting_failed})")
        return result
