"""Recording service exposing the start / data chunk / stop signal surface."""

import asyncio
import logging
from typing import Callable, Optional, Set

from .session_manager import RecordingSessionManager
from ..errors import RecordingIOError
from ..models.events import RecordingResultEvent, SignalResponse
from ..models.session import SessionState
from ..models.transcription import TranscriptionResult
from ..transcription.pipeline import TranscriptionPipeline

logger = logging.getLogger(__name__)


class RecordingService:
    """Entry point for the host UI.

    ``start`` and ``stop`` return a SignalResponse; ``data_chunk`` is
    fire-and-forget. After a stop that produced a file the pipeline runs in a
    background task and its outcome is delivered once through
    ``result_callback``.
    """

    def __init__(self,
                 session_manager: RecordingSessionManager,
                 pipeline: TranscriptionPipeline,
                 result_callback: Callable[[RecordingResultEvent], None]):
        """Initialize recording service.

        Args:
            session_manager: Owner of the active recording session
            pipeline: Pipeline run on every finalized recording
            result_callback: Receives one RecordingResultEvent per processed recording
        """
        self.session_manager = session_manager
        self.pipeline = pipeline
        self.result_callback = result_callback
        self._pending: Set["asyncio.Task[None]"] = set()

    @property
    def is_recording(self) -> bool:
        return self.session_manager.state is SessionState.OPEN

    async def start(self, mime_type: Optional[str] = None) -> SignalResponse:
        """Handle the inbound start signal."""
        try:
            file_path = await self.session_manager.start(mime_type)
        except RecordingIOError as e:
            logger.error(f"Failed to start recording: {e}")
            return SignalResponse(ok=False, error=str(e))
        return SignalResponse(ok=True, file_path=str(file_path))

    def data_chunk(self, data: Optional[bytes]) -> None:
        """Handle an inbound audio chunk; never blocks, never raises."""
        self.session_manager.append_chunk(data)

    async def stop(self) -> SignalResponse:
        """Handle the inbound stop signal.

        Finalizes the sink and schedules the pipeline; the result is pushed
        later through the result callback.
        """
        try:
            session = await self.session_manager.finalize()
        except RecordingIOError as e:
            logger.error(f"Failed to stop recording: {e}")
            return SignalResponse(ok=False, error=str(e))

        if session is None:
            return SignalResponse(ok=True, file_path=None)
        file_path, mime_type = session.file_path, session.mime_type

        task = asyncio.get_running_loop().create_task(self._process(str(file_path), mime_type))
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)
        return SignalResponse(ok=True, file_path=str(file_path))

    async def _process(self, file_path: str, mime_type: str) -> None:
        try:
            result = await self.pipeline.run(file_path, mime_type)
        except Exception as e:
            logger.exception(f"Unexpected error while processing {file_path}")
            result = TranscriptionResult(file_path=file_path, error=f"Unexpected error: {e}")
        self._deliver(result)

    def _deliver(self, result: TranscriptionResult) -> None:
        event = RecordingResultEvent.from_result(result)
        try:
            self.result_callback(event)
        except Exception:
            logger.exception(f"Result listener failed for {event.file_path}")

    def _on_task_done(self, task: "asyncio.Task[None]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled error while processing recording", exc_info=exc)

    async def wait_for_results(self) -> None:
        """Wait until every scheduled pipeline run has delivered its result."""
        while self._pending:
            pending = list(self._pending)
            await asyncio.gather(*pending, return_exceptions=True)
            self._pending.difference_update(pending)
