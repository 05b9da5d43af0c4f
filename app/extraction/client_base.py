from abc import ABC, abstractmethod
from typing import ClassVar

from app.extraction.models import ProviderResponse


class BaseExtractionClient(ABC):
    """Contract for provider-specific structured-extraction clients."""

    provider: ClassVar[str]

    @abstractmethod
    def extract(
        self,
        *,
        image_base64: str,
        media_type: str,
        prompt: str,
    ) -> ProviderResponse:
        """Send one image plus the extraction prompt to the provider.

        Returns:
            ProviderResponse with the verbatim response body and the model's
            text answer.

        Raises:
            ExtractionUnavailableError: on any disqualifying condition (transport
                failure, non-success status, unreadable answer). Never retried.
        """
