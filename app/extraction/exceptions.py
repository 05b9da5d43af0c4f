class ExtractionError(Exception):
    """Raised when contact extraction fails."""


class ExtractionUnavailableError(ExtractionError):
    """Raised when the structured-extraction provider cannot be used for a request.

    Always recovered by the local OCR fallback; ``reason`` is attached to the
    degraded outcome.
    """

    def __init__(self, reason: str, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason
        self.status_code = status_code


class InternalExtractionError(ExtractionError):
    """Raised when the local OCR fallback itself fails."""
