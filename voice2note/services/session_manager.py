"""Session manager owning the lifecycle of the single active recording."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from ..audio.sink import AudioSink
from ..errors import RecordingIOError
from ..models.session import Session, SessionState, DEFAULT_MIME_TYPE
from ..storage.file_manager import FileManager

logger = logging.getLogger(__name__)


class RecordingSessionManager:
    """Owns at most one open recording session.

    State machine is ``IDLE -> OPEN (start) -> IDLE (stop)``. A ``start`` while
    a session is open abandons the old session: its sink is closed and it is
    never handed to the pipeline (last-writer-wins).
    """

    def __init__(self, file_manager: FileManager):
        """Initialize session manager.

        Args:
            file_manager: Allocates the output file for each session
        """
        self.file_manager = file_manager
        self._session: Optional[Session] = None
        self._lock: Optional[asyncio.Lock] = None
        logger.info(f"RecordingSessionManager initialized with output dir: {file_manager.output_dir}")

    @property
    def state(self) -> SessionState:
        if self._session is not None and self._session.is_open:
            return SessionState.OPEN
        return SessionState.IDLE

    def _transition_lock(self) -> asyncio.Lock:
        # Created lazily so it binds to the loop that runs the session
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def current_session(self) -> Optional[Session]:
        return self._session

    async def start(self, mime_type: Optional[str] = None) -> Path:
        """Open a new session and its sink.

        Args:
            mime_type: Declared content type of the incoming audio

        Returns:
            Path of the new recording file

        Raises:
            RecordingIOError: If the output directory or file cannot be created
        """
        mime_type = mime_type or DEFAULT_MIME_TYPE

        # Concurrent starts queue up here; the last one holds the slot
        async with self._transition_lock():
            previous, self._session = self._session, None
            if previous is not None:
                await self._abandon(previous)

            loop = asyncio.get_running_loop()
            session_id, file_path, handle = await loop.run_in_executor(
                None, self.file_manager.create_recording_file, mime_type
            )

            sink = AudioSink(file_path, handle)
            sink.start()
            session = Session(
                session_id=session_id,
                file_path=file_path,
                mime_type=mime_type,
                sink=sink,
            )
            self._session = session

        logger.info(f"Started session {session_id} ({mime_type}) -> {file_path}")
        return file_path

    async def _abandon(self, session: Session) -> None:
        logger.warning(f"Abandoning open session {session.session_id}; "
                       f"{session.file_path} will not be transcribed")
        try:
            await session.sink.close()
        except RecordingIOError as e:
            logger.error(f"Error closing abandoned session {session.session_id}: {e}")

    def append_chunk(self, data: Optional[bytes]) -> None:
        """Append a chunk to the open session in call order.

        Never blocks and never raises; a missing session or empty chunk is a
        logged no-op, and so is a chunk that is not bytes-like.
        """
        session = self._session
        if session is None or not session.is_open:
            logger.debug("append_chunk called with no open session, ignoring")
            return
        if not data:
            logger.debug(f"Ignoring empty chunk for session {session.session_id}")
            return
        if not isinstance(data, (bytes, bytearray, memoryview)):
            logger.warning(f"Dropping {type(data).__name__} chunk for session {session.session_id}; "
                           f"expected bytes")
            return
        session.sink.append(data)

    async def stop(self) -> Optional[Path]:
        """Finalize the open session.

        Waits for queued chunks to be written, then flushes and closes the sink.

        Returns:
            Path of the finalized file, or None if no session was open

        Raises:
            RecordingIOError: If the sink cannot be closed
        """
        session = await self.finalize()
        return session.file_path if session is not None else None

    async def finalize(self) -> Optional[Session]:
        """Like ``stop`` but returns the finalized Session itself."""
        async with self._transition_lock():
            session, self._session = self._session, None
            if session is None:
                logger.info("stop called with no open session")
                return None

            await session.sink.close()
        logger.info(f"Stopped session {session.session_id}: {session.sink.chunks_written} chunks, "
                    f"{session.sink.bytes_written} bytes")
        return session
