"""Pytest configuration and fixtures for Voice2Note tests."""

import pytest
import pytest_asyncio
import tempfile
import logging
from typing import Any, Dict, List, Optional

import numpy as np
from aiohttp import web
from aiohttp.test_utils import TestServer

from voice2note.config import ProviderSettings
from voice2note.errors import ProviderError
from voice2note.transcription.base import AbstractProviderBackend


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests spanning several components")


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate
    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * 440 * t)
    return (wave_data * 32767).astype(np.int16).tobytes()


@pytest.fixture
def audio_chunks():
    """Distinct chunks of varying size so ordering mistakes show up."""
    rng = np.random.default_rng(1234)
    return [rng.integers(0, 256, size, dtype=np.uint8).tobytes() for size in (1, 17, 512, 4096, 3, 2048)]


def make_settings(name: str = "fake", base_url: str = "http://127.0.0.1:1",
                  api_key: Optional[str] = "test-key", **kwargs) -> ProviderSettings:
    return ProviderSettings(
        name=name,
        base_url=base_url,
        api_key=api_key,
        stt_model=kwargs.pop("stt_model", "stt-model"),
        formatting_model=kwargs.pop("formatting_model", "fmt-model"),
        request_timeout=kwargs.pop("request_timeout", 5.0),
    )


class FakeBackend(AbstractProviderBackend):
    """In-memory backend recording every call."""

    provider_name = "fake"

    def __init__(self, transcript: str = "hello world", formatted: Optional[str] = None,
                 stt_error: Optional[Exception] = None, format_error: Optional[Exception] = None):
        super().__init__(make_settings())
        self.transcript = transcript
        self.formatted = formatted
        self.stt_error = stt_error
        self.format_error = format_error
        self.transcribe_calls: List[Dict[str, Any]] = []
        self.format_calls: List[str] = []

    async def transcribe(self, audio_bytes: bytes, mime_type: str) -> str:
        self.transcribe_calls.append({"audio": audio_bytes, "mime_type": mime_type})
        if self.stt_error is not None:
            raise self.stt_error
        return self.transcript

    async def format(self, raw_text: str) -> str:
        self.format_calls.append(raw_text)
        if self.format_error is not None:
            raise self.format_error
        if self.formatted is not None:
            return self.formatted
        return f"Formatted: {raw_text}"


@pytest.fixture
def fake_backend_factory():
    return FakeBackend


@pytest.fixture
def provider_failure():
    return ProviderError("fake", 500, "internal error")


class FakeProviderServer:
    """Minimal OpenAI/Gemini compatible HTTP server counting requests."""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.status = 200
        self.error_body = "backend exploded"
        self.raw_body: Optional[str] = None
        self.responses: Dict[str, Any] = {
            "transcriptions": {"text": "hello from openai"},
            "chat": {"choices": [{"message": {"content": "  Formatted by openai  "}}]},
            "gemini": {"candidates": [{"content": {"parts": [{"text": "hello "}, {"text": "from gemini"}]}}]},
        }
        self.server: Optional[TestServer] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.server.host}:{self.server.port}"

    def _reply(self, key: str) -> web.Response:
        if self.status != 200:
            return web.Response(status=self.status, text=self.error_body)
        if self.raw_body is not None:
            return web.Response(status=200, text=self.raw_body, content_type="text/html")
        return web.json_response(self.responses[key])

    async def _transcriptions(self, request: web.Request) -> web.Response:
        form = await request.post()
        upload = form["file"]
        self.requests.append({
            "route": "transcriptions",
            "auth": request.headers.get("Authorization"),
            "model": form["model"],
            "filename": upload.filename,
            "content_type": upload.content_type,
            "audio": upload.file.read(),
        })
        return self._reply("transcriptions")

    async def _chat(self, request: web.Request) -> web.Response:
        self.requests.append({
            "route": "chat",
            "auth": request.headers.get("Authorization"),
            "json": await request.json(),
        })
        return self._reply("chat")

    async def _gemini(self, request: web.Request) -> web.Response:
        self.requests.append({
            "route": "gemini",
            "target": request.match_info["target"],
            "api_key": request.headers.get("x-goog-api-key"),
            "json": await request.json(),
        })
        return self._reply("gemini")

    async def start(self) -> None:
        app = web.Application()
        app.router.add_post("/v1/audio/transcriptions", self._transcriptions)
        app.router.add_post("/v1/chat/completions", self._chat)
        app.router.add_post("/v1beta/models/{target}", self._gemini)
        self.server = TestServer(app)
        await self.server.start_server()

    async def close(self) -> None:
        await self.server.close()


@pytest_asyncio.fixture
async def provider_server():
    server = FakeProviderServer()
    await server.start()
    yield server
    await server.close()


@pytest.fixture
def settings_factory():
    return make_settings
