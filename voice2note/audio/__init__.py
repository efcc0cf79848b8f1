"""Audio sink for recorded sessions."""

from .sink import AudioSink

__all__ = [
    'AudioSink'
]
