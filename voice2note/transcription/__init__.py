"""Provider backends and the transcription pipeline for Voice2Note."""

from .base import AbstractProviderBackend
from ..models.transcription import TranscriptionResult
from .openai_backend import OpenAIBackend
from .gemini_backend import GeminiBackend
from .selector import Provider, ProviderSelector
from .pipeline import TranscriptionPipeline
from .publisher import ResultPublisher, RESULT_TOPIC

__all__ = [
    "AbstractProviderBackend",
    "TranscriptionResult",
    "OpenAIBackend",
    "GeminiBackend",
    "Provider",
    "ProviderSelector",
    "TranscriptionPipeline",
    "ResultPublisher",
    "RESULT_TOPIC",
]
