from abc import ABC, abstractmethod
from collections.abc import Callable

ProgressCallback = Callable[[float], None]


class BaseOcrEngine(ABC):
    """Contract for all full-text OCR adapters."""

    @abstractmethod
    def recognize(
        self,
        image: bytes,
        language: str,
        progress: ProgressCallback | None = None,
    ) -> str:
        """Recognize all text on an image.

        Args:
            image: Encoded image bytes.
            language: OCR language code, e.g. "eng".
            progress: Optional callback receiving completion in the 0.0-1.0
                      range. Advisory only.

        Returns:
            Recognized text, lines separated by newlines.

        Raises:
            OcrError: if recognition fails for any reason.
        """
