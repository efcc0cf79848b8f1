"""File management for recording output files."""

import logging
import random
import string
from pathlib import Path
from datetime import datetime
from typing import Optional, Tuple

from ..errors import RecordingIOError

logger = logging.getLogger(__name__)

GENERIC_EXTENSION = ".dat"


def extension_for_mime(mime_type: Optional[str]) -> str:
    """Infer a file extension from a declared MIME type.

    ``webm`` maps to ``.webm``, ``wav`` to ``.wav``, anything else to ``.dat``.
    """
    mime = (mime_type or "").lower()
    if "webm" in mime:
        return ".webm"
    if "wav" in mime:
        return ".wav"
    return GENERIC_EXTENSION


class FileManager:
    """Allocates uniquely named recording files in a fixed output directory.

    Files are created exclusively and never overwritten or deleted here;
    retention is left to the user.
    """

    def __init__(self, output_dir: str = "./recordings", max_attempts: int = 5):
        """Initialize file manager.

        Args:
            output_dir: Directory recordings are written to
            max_attempts: Attempts at finding an unused file name
        """
        self.output_dir = Path(output_dir)
        self.max_attempts = max_attempts
        logger.info(f"FileManager initialized with output_dir: {self.output_dir}")

    def ensure_output_directory(self) -> None:
        """Create the output directory if needed."""
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RecordingIOError(f"Cannot create output directory {self.output_dir}: {e}") from e
        logger.debug(f"Ensured directory exists: {self.output_dir}")

    def new_session_id(self) -> str:
        """Timestamp-derived session ID with a random suffix."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=4))
        return f"{timestamp}_{random_suffix}"

    def create_recording_file(self, mime_type: Optional[str]) -> Tuple[str, Path, object]:
        """Create a new, empty recording file opened for appending.

        Blocking; callers on the event loop run it in an executor.

        Returns:
            Tuple of (session_id, file path, open binary file object)
        """
        self.ensure_output_directory()
        extension = extension_for_mime(mime_type)

        for _ in range(self.max_attempts):
            session_id = self.new_session_id()
            file_path = self.output_dir / f"recording_{session_id}{extension}"
            try:
                handle = open(file_path, 'xb')
            except FileExistsError:
                logger.debug(f"Recording path already taken, retrying: {file_path}")
                continue
            except OSError as e:
                raise RecordingIOError(f"Cannot open recording file {file_path}: {e}") from e

            logger.info(f"Created recording file: {file_path}")
            return session_id, file_path, handle

        raise RecordingIOError(
            f"Could not allocate a unique recording file in {self.output_dir} "
            f"after {self.max_attempts} attempts"
        )
