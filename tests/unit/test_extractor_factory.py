from unittest.mock import patch

import pytest

from app.config.settings import Settings
from app.extraction.anthropic_client_adapter import AnthropicClientAdapter
from app.extraction.example_client_adapter import ExampleClientAdapter
from app.extraction.extractor import ContactExtractor
from app.extraction.factory import ExtractorFactory
from app.extraction.openai_client_adapter import OpenAIClientAdapter


class TestCreateClient:
    def test_anthropic_with_key(self) -> None:
        settings = Settings(extraction_provider="anthropic", anthropic_api_key="sk-a")
        assert isinstance(ExtractorFactory.create_client(settings), AnthropicClientAdapter)

    def test_anthropic_without_key_returns_none(self) -> None:
        settings = Settings(extraction_provider="anthropic", anthropic_api_key="")
        assert ExtractorFactory.create_client(settings) is None

    def test_openai_with_key(self) -> None:
        settings = Settings(extraction_provider="openai", openai_api_key="sk-o")
        assert isinstance(ExtractorFactory.create_client(settings), OpenAIClientAdapter)

    def test_openai_without_key_returns_none(self) -> None:
        settings = Settings(extraction_provider="openai", openai_api_key="")
        assert ExtractorFactory.create_client(settings) is None

    def test_example_needs_no_key(self) -> None:
        settings = Settings(extraction_provider="example")
        assert isinstance(ExtractorFactory.create_client(settings), ExampleClientAdapter)

    def test_provider_is_case_insensitive(self) -> None:
        settings = Settings(extraction_provider="EXAMPLE")
        assert isinstance(ExtractorFactory.create_client(settings), ExampleClientAdapter)

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown extraction provider 'gemini'"):
            ExtractorFactory.create_client(Settings(extraction_provider="gemini"))


class TestOpenAICompatible:
    def test_requires_base_url(self) -> None:
        settings = Settings(
            extraction_provider="openai_compatible",
            openai_compatible_api_key="k",
            openai_compatible_base_url="",
        )
        with pytest.raises(ValueError, match="openai_compatible_base_url"):
            ExtractorFactory.create_client(settings)

    def test_without_key_returns_none(self) -> None:
        settings = Settings(
            extraction_provider="openai_compatible",
            openai_compatible_api_key="",
            openai_compatible_base_url="http://localhost:11434/v1",
        )
        assert ExtractorFactory.create_client(settings) is None

    def test_passes_base_url(self) -> None:
        settings = Settings(
            extraction_provider="openai_compatible",
            openai_compatible_api_key="k",
            openai_compatible_model_name="llava",
            openai_compatible_base_url=" http://localhost:11434/v1 ",
        )
        with patch("app.extraction.openai_client_adapter.openai.OpenAI") as openai_cls:
            client = ExtractorFactory.create_client(settings)
        assert isinstance(client, OpenAIClientAdapter)
        assert openai_cls.call_args.kwargs["base_url"] == "http://localhost:11434/v1"


class TestCreate:
    def test_builds_contact_extractor(self) -> None:
        extractor = ExtractorFactory.create(Settings(extraction_provider="example"))
        assert isinstance(extractor, ContactExtractor)

    def test_unknown_ocr_engine_raises(self) -> None:
        settings = Settings(extraction_provider="example", ocr_engine="easyocr")
        with pytest.raises(ValueError, match="Unknown OCR engine"):
            ExtractorFactory.create(settings)
