"""Abstract base class for provider backends."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import asyncio
import logging

import aiohttp

from ..config import ProviderSettings
from ..errors import ConfigError, ProviderError

logger = logging.getLogger(__name__)


class AbstractProviderBackend(ABC):
    """Capability interface implemented once per provider.

    A backend can transcribe audio and format a raw transcript. Instances hold
    only settings; an HTTP session is opened per request, so constructing a
    backend never touches the network.
    """

    provider_name = "abstract"

    def __init__(self, settings: ProviderSettings):
        """Initialize backend with its provider settings."""
        self.settings = settings

    @abstractmethod
    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> str:
        """Transcribe audio and return the text.

        Args:
            audio_bytes: Complete recording
            mime_type: Declared content type of the recording

        Returns:
            Transcript text, empty string if the provider returned none

        Raises:
            ConfigError: If the credential is missing
            ProviderError: If the provider call fails
        """
        pass

    @abstractmethod
    async def format(self, raw_text: str) -> str:
        """Rewrite a raw transcript into cleaned, structured text.

        Raises:
            ConfigError: If the credential is missing
            ProviderError: If the provider call fails
        """
        pass

    def _require_api_key(self) -> str:
        """Return the credential or fail before any network call is made."""
        api_key = self.settings.api_key
        if not api_key:
            raise ConfigError(f"No API key configured for provider '{self.provider_name}'")
        return api_key

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}{path}"

    async def _post(self, url: str, headers: Dict[str, str],
                    json: Optional[Dict[str, Any]] = None,
                    data: Optional[aiohttp.FormData] = None) -> Dict[str, Any]:
        """POST a request and decode the JSON response.

        Raises:
            ProviderError: On a non-2xx status, a body that is not a JSON
                object or a transport failure
        """
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, headers=headers, json=json, data=data) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        logger.error(f"{self.provider_name} returned {response.status} for {url}")
                        raise ProviderError(self.provider_name, response.status, error_text)

                    try:
                        result = await response.json(content_type=None)
                    except ValueError:
                        body = await response.text()
                        logger.error(f"{self.provider_name} returned a non-JSON body for {url}")
                        raise ProviderError(self.provider_name, response.status, f"invalid JSON response: {body[:500]}")
        except aiohttp.ClientError as e:
            raise ProviderError(self.provider_name, None, f"request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderError(self.provider_name, None, "request timed out") from e

        if not isinstance(result, dict):
            raise ProviderError(self.provider_name, response.status, f"unexpected response: {result!r}")
        return result
