from abc import ABC, abstractmethod

from app.extraction.models import ExtractionOutcome


class BaseContactExtractor(ABC):
    """Contract for turning a card image into contact fields."""

    @abstractmethod
    def extract(self, image: bytes, media_type: str) -> ExtractionOutcome:
        """Extract the twelve contact fields from a card image.

        Args:
            image: Encoded image bytes, normally already size-normalized.
            media_type: Declared media type of ``image``.

        Returns:
            StructuredOutcome from the remote model, or DegradedOutcome from the
            local OCR fallback carrying the fallback reason.

        Raises:
            InternalExtractionError: if the fallback path itself fails.
        """
