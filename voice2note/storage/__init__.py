"""Recording file storage."""

from .file_manager import FileManager, extension_for_mime

__all__ = [
    "FileManager",
    "extension_for_mime",
]
