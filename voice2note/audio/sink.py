"""Append-only audio sink with an ordered background writer."""

import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional

from ..errors import RecordingIOError

logger = logging.getLogger(__name__)

_CLOSE = object()


class AudioSink:
    """Append-only destination for the audio bytes of one session.

    Chunks are queued without blocking the caller and written strictly in
    the order they were appended by a single writer task. Blocking file calls
    run in the loop's default executor.
    """

    def __init__(self, file_path: Path, handle: BinaryIO):
        """Initialize sink over an already opened binary file.

        Args:
            file_path: Path of the open file
            handle: Binary file object opened for writing
        """
        self.file_path = Path(file_path)
        self._handle = handle
        self._queue: "asyncio.Queue[object]" = asyncio.Queue()
        self._writer_task: Optional["asyncio.Task[None]"] = None
        self._accepting = True
        self._closing: Optional["asyncio.Task[Path]"] = None

        self.chunks_written = 0
        self.bytes_written = 0
        self.write_errors = 0

    @property
    def is_open(self) -> bool:
        return self._accepting

    def start(self) -> None:
        """Start the writer task on the running event loop."""
        if self._writer_task is None:
            self._writer_task = asyncio.get_running_loop().create_task(
                self._write_loop(), name=f"sink-writer-{self.file_path.name}"
            )

    def append(self, data: bytes) -> bool:
        """Queue bytes for writing. Returns False if the sink no longer accepts data."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            logger.warning(f"Sink {self.file_path.name} dropping {type(data).__name__} chunk, expected bytes")
            return False
        if not self._accepting:
            logger.debug(f"Sink {self.file_path.name} is closed, dropping {len(data)} bytes")
            return False
        self._queue.put_nowait(bytes(data))
        return True

    async def _write_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            item = await self._queue.get()
            if item is _CLOSE:
                return
            try:
                await loop.run_in_executor(None, self._handle.write, item)
            except OSError as e:
                # Recording continues best-effort
                self.write_errors += 1
                logger.error(f"Error writing {len(item)} bytes to {self.file_path}: {e}")
                continue
            self.chunks_written += 1
            self.bytes_written += len(item)

    def _flush_and_close(self) -> None:
        try:
            self._handle.flush()
            os.fsync(self._handle.fileno())
        finally:
            self._handle.close()

    async def close(self) -> Path:
        """Write every queued chunk, then flush and close the file.

        Concurrent and repeated calls share one close operation.

        Raises:
            RecordingIOError: If the file cannot be flushed or closed
        """
        self._accepting = False
        if self._closing is None:
            self._closing = asyncio.get_running_loop().create_task(self._close())
        return await asyncio.shield(self._closing)

    async def _close(self) -> Path:
        if self._writer_task is not None:
            self._queue.put_nowait(_CLOSE)
            await self._writer_task
            self._writer_task = None

        if self._handle.closed:
            return self.file_path

        try:
            await asyncio.get_running_loop().run_in_executor(None, self._flush_and_close)
        except OSError as e:
            raise RecordingIOError(f"Error closing recording file {self.file_path}: {e}") from e

        logger.info(f"Sink closed: {self.file_path} "
                    f"({self.chunks_written} chunks, {self.bytes_written} bytes, "
                    f"{self.write_errors} write errors)")
        return self.file_path
