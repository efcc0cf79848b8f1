"""Unit tests for provider selection."""

import pytest
from unittest.mock import patch

from voice2note.config import ProviderConfig, ProviderSettings
from voice2note.transcription.gemini_backend import GeminiBackend
from voice2note.transcription.openai_backend import OpenAIBackend
from voice2note.transcription.selector import Provider, ProviderSelector


@pytest.mark.unit
class TestProviderSelector:

    def test_independent_selection(self):
        selector = ProviderSelector(ProviderConfig(stt_provider="gemini", formatting_provider="openai"))

        assert isinstance(selector.speech_to_text(), GeminiBackend)
        assert isinstance(selector.formatter(), OpenAIBackend)

    def test_same_provider_for_both_stages(self):
        selector = ProviderSelector(ProviderConfig(stt_provider="openai", formatting_provider="openai"))

        assert isinstance(selector.speech_to_text(), OpenAIBackend)
        assert isinstance(selector.formatter(), OpenAIBackend)

    @pytest.mark.parametrize("name", ["whisper-local", "", "  "])
    def test_unknown_provider_falls_back_to_openai(self, name):
        selector = ProviderSelector(ProviderConfig(stt_provider=name, formatting_provider=name))

        assert selector.stt_provider is Provider.OPENAI
        assert isinstance(selector.speech_to_text(), OpenAIBackend)
        assert isinstance(selector.formatter(), OpenAIBackend)

    def test_names_are_case_insensitive(self):
        assert Provider.parse(" Gemini ") is Provider.GEMINI

    def test_backends_receive_their_settings(self):
        gemini = ProviderSettings(name="gemini", base_url="http://gemini.test", api_key="g",
                                  stt_model="g-stt", formatting_model="g-fmt")
        selector = ProviderSelector(ProviderConfig(
            stt_provider="gemini", formatting_provider="gemini", providers={"gemini": gemini}
        ))

        assert selector.speech_to_text().settings is gemini

    def test_defaults_used_when_settings_absent(self):
        selector = ProviderSelector(ProviderConfig(stt_provider="gemini"))

        backend = selector.speech_to_text()

        assert backend.settings.base_url == "https://generativelanguage.googleapis.com"
        assert backend.settings.api_key is None

    def test_selection_performs_no_network_io(self):
        with patch("aiohttp.ClientSession") as session_cls:
            selector = ProviderSelector(ProviderConfig(stt_provider="openai", formatting_provider="gemini"))
            selector.speech_to_text()
            selector.formatter()

        session_cls.assert_not_called()
