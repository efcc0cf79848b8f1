"""Provider selection for the speech-to-text and formatting stages."""

import logging
from enum import Enum
from typing import Dict, Type

from .base import AbstractProviderBackend
from .gemini_backend import GeminiBackend
from .openai_backend import OpenAIBackend
from ..config import ProviderConfig, DEFAULT_PROVIDER

logger = logging.getLogger(__name__)


class Provider(Enum):
    """Supported provider backends."""
    OPENAI = "openai"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, name: str) -> "Provider":
        """Resolve a provider name; unknown names fall back to the default (openai)."""
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            fallback = cls(DEFAULT_PROVIDER)
            logger.warning(f"Unknown provider '{name}', falling back to '{fallback.value}'")
            return fallback


BACKENDS: Dict[Provider, Type[AbstractProviderBackend]] = {
    Provider.OPENAI: OpenAIBackend,
    Provider.GEMINI: GeminiBackend,
}


class ProviderSelector:
    """Resolves the STT and formatting backends independently.

    Selection is pure: it builds backend objects from settings and performs no
    network I/O.
    """

    def __init__(self, config: ProviderConfig):
        self.config = config

    def _build(self, provider: Provider) -> AbstractProviderBackend:
        settings = self.config.settings_for(provider.value)
        return BACKENDS[provider](settings)

    @property
    def stt_provider(self) -> Provider:
        return Provider.parse(self.config.stt_provider)

    @property
    def formatting_provider(self) -> Provider:
        return Provider.parse(self.config.formatting_provider)

    def speech_to_text(self) -> AbstractProviderBackend:
        return self._build(self.stt_provider)

    def formatter(self) -> AbstractProviderBackend:
        return self._build(self.formatting_provider)
