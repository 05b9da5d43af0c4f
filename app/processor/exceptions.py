class ProcessorError(Exception):
    """Base exception for all scan-processing errors."""


class CardNotFoundError(ProcessorError):
    """Raised when a business card cannot be found in the database."""


class InvalidScanRequestError(ProcessorError):
    """Raised when a scan request carries no usable image."""


class StorageDisabledError(ProcessorError):
    """Raised when a card operation needs the database but storage is off."""


class InvalidCardRequestError(ProcessorError):
    """Raised when a card create or update body is malformed."""
