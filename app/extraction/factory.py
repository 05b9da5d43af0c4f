from typing import ClassVar

from app.config.settings import Settings
from app.extraction.anthropic_client_adapter import AnthropicClientAdapter
from app.extraction.base import BaseContactExtractor
from app.extraction.client_base import BaseExtractionClient
from app.extraction.example_client_adapter import ExampleClientAdapter
from app.extraction.extractor import ContactExtractor
from app.extraction.openai_client_adapter import OpenAIClientAdapter
from app.logging.logger import Log
from app.ocr.factory import OcrEngineFactory


class ExtractorFactory:
    """Creates the contact extractor with the configured provider and OCR engine."""

    PROVIDERS: ClassVar[tuple[str, ...]] = (
        "anthropic",
        "openai",
        "openai_compatible",
        "example",
    )

    @classmethod
    def create(cls, settings: Settings) -> BaseContactExtractor:
        """Create a configured extractor from application settings."""
        return ContactExtractor(
            client=cls.create_client(settings),
            ocr_engine=OcrEngineFactory.create(settings),
            ocr_language=settings.ocr_language,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseExtractionClient | None:
        """Create the provider client, or None when its API key is not set."""
        provider = settings.extraction_provider.lower()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown extraction provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "anthropic":
            if not settings.anthropic_api_key:
                Log.warning("ANTHROPIC_API_KEY is not set, scans will use local OCR")
                return None
            return AnthropicClientAdapter(
                api_key=settings.anthropic_api_key,
                model=settings.anthropic_model_name,
                max_tokens=settings.anthropic_max_tokens,
                timeout_seconds=settings.anthropic_timeout_seconds,
                base_url=settings.anthropic_base_url,
            )
        if provider == "openai":
            if not settings.openai_api_key:
                Log.warning("OPENAI_API_KEY is not set, scans will use local OCR")
                return None
            return OpenAIClientAdapter(
                api_key=settings.openai_api_key,
                model=settings.openai_model_name,
                max_tokens=settings.openai_max_tokens,
                timeout_seconds=settings.openai_timeout_seconds,
            )
        return cls._create_openai_compatible(settings)

    @classmethod
    def _create_openai_compatible(cls, settings: Settings) -> BaseExtractionClient | None:
        base_url = settings.openai_compatible_base_url.strip()
        if not base_url:
            raise ValueError(
                "openai_compatible_base_url is required for "
                "extraction_provider=openai_compatible"
            )
        if not settings.openai_compatible_api_key:
            Log.warning("OPENAI_COMPATIBLE_API_KEY is not set, scans will use local OCR")
            return None
        return OpenAIClientAdapter(
            api_key=settings.openai_compatible_api_key,
            model=settings.openai_compatible_model_name,
            max_tokens=settings.openai_max_tokens,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=base_url,
        )
