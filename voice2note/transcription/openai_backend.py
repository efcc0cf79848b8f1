"""OpenAI-compatible backend: multipart speech-to-text and chat formatting."""

import logging

import aiohttp

from .base import AbstractProviderBackend
from .prompts import FORMATTING_PROMPT
from ..errors import ProviderError
from ..storage.file_manager import extension_for_mime

logger = logging.getLogger(__name__)


class OpenAIBackend(AbstractProviderBackend):
    """OpenAI API backend.

    Speech-to-text uploads the recording as a multipart file; formatting uses
    the chat completions endpoint. Any OpenAI-compatible server works through
    the ``base_url`` setting.
    """

    provider_name = "openai"

    def __init__(self, settings, temperature: float = 0.3):
        super().__init__(settings)
        self.temperature = temperature

    def _headers(self, api_key: str) -> dict:
        return {"Authorization": f"Bearer {api_key}"}

    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> str:
        api_key = self._require_api_key()

        form = aiohttp.FormData()
        form.add_field(
            "file",
            audio_bytes,
            filename=f"audio{extension_for_mime(mime_type)}",
            content_type=mime_type,
        )
        form.add_field("model", self.settings.stt_model)

        logger.debug(f"Transcribing {len(audio_bytes)} bytes ({mime_type}) with {self.settings.stt_model}")
        result = await self._post(
            self._url("/v1/audio/transcriptions"),
            headers=self._headers(api_key),
            data=form,
        )
        text = result.get("text") or ""
        if not isinstance(text, str):
            raise ProviderError(self.provider_name, 200, f"unexpected transcription response: {result!r}")
        return text.strip()

    async def format(self, raw_text: str) -> str:
        api_key = self._require_api_key()

        data = {
            "model": self.settings.formatting_model,
            "messages": [
                {"role": "system", "content": FORMATTING_PROMPT},
                {"role": "user", "content": raw_text},
            ],
            "temperature": self.temperature,
        }

        result = await self._post(
            self._url("/v1/chat/completions"),
            headers=self._headers(api_key),
            json=data,
        )
        choices = result.get("choices") or []
        if not choices:
            return ""
        try:
            content = choices[0]["message"].get("content") or ""
        except (TypeError, KeyError, IndexError, AttributeError) as e:
            raise ProviderError(self.provider_name, 200, f"unexpected chat response: {result!r}") from e
        if not isinstance(content, str):
            raise ProviderError(self.provider_name, 200, f"unexpected chat response: {result!r}")
        return content.strip()
