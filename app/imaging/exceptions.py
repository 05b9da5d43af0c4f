class ImagingError(Exception):
    """Base exception for image decoding and compression."""


class InvalidImageError(ImagingError):
    """Raised when the input is not a decodable image."""


class CompressionCancelledError(ImagingError):
    """Raised when the caller cancels compression between attempts."""
