"""Gemini backend: inline base64 speech-to-text and generateContent formatting."""

import base64
import logging
from typing import Any, Dict

from .base import AbstractProviderBackend
from .prompts import FORMATTING_PROMPT, TRANSCRIPTION_PROMPT
from ..errors import ProviderError

logger = logging.getLogger(__name__)


def extract_text(data: Dict[str, Any]) -> str:
    """Concatenate every text part of every candidate in a Gemini response.

    Raises:
        ProviderError: If the response does not have the documented shape
    """
    fragments = []
    try:
        for candidate in data.get("candidates") or []:
            parts = ((candidate or {}).get("content") or {}).get("parts") or []
            for part in parts:
                text = part.get("text", "")
                if not isinstance(text, str):
                    raise TypeError(f"text part is {type(text).__name__}")
                fragments.append(text)
    except (TypeError, AttributeError) as e:
        raise ProviderError("gemini", 200, f"unexpected generateContent response: {data!r}") from e
    return "".join(fragments).strip()


class GeminiBackend(AbstractProviderBackend):
    """Gemini Developer API backend (``models/{model}:generateContent``)."""

    provider_name = "gemini"

    def _endpoint(self, model: str) -> str:
        return self._url(f"/v1beta/models/{model}:generateContent")

    def _headers(self, api_key: str) -> dict:
        return {"x-goog-api-key": api_key}

    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> str:
        api_key = self._require_api_key()

        # Codec parameters such as ";codecs=opus" are not accepted inline
        base_mime = mime_type.split(";")[0].strip() or mime_type
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": TRANSCRIPTION_PROMPT},
                        {
                            "inline_data": {
                                "mime_type": base_mime,
                                "data": base64.b64encode(audio_bytes).decode("ascii"),
                            }
                        },
                    ],
                }
            ]
        }

        logger.debug(f"Transcribing {len(audio_bytes)} bytes ({base_mime}) with {self.settings.stt_model}")
        data = await self._post(
            self._endpoint(self.settings.stt_model),
            headers=self._headers(api_key),
            json=body,
        )
        return extract_text(data)

    async def format(self, raw_text: str) -> str:
        api_key = self._require_api_key()

        body = {
            "system_instruction": {"parts": [{"text": FORMATTING_PROMPT}]},
            "contents": [
                {"role": "user", "parts": [{"text": raw_text}]}
            ],
        }

        data = await self._post(
            self._endpoint(self.settings.formatting_model),
            headers=self._headers(api_key),
            json=body,
        )
        return extract_text(data)
