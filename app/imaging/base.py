from abc import ABC, abstractmethod
from typing import Protocol


class Surface(Protocol):
    """Decoded pixel buffer owned by a codec. Must be closed by its owner."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def close(self) -> None: ...


class BaseImageCodec(ABC):
    """Contract for platform image decode/render/encode adapters."""

    @abstractmethod
    def decode(self, data: bytes) -> Surface:
        """Decode raw image bytes into a surface.

        Raises:
            InvalidImageError: if the bytes are not a decodable image.
        """

    @abstractmethod
    def render(self, source: Surface, width: int, height: int) -> Surface:
        """Draw the whole source into a new surface of exactly width x height."""

    @abstractmethod
    def encode(self, surface: Surface, quality: float) -> bytes:
        """Encode a surface as JPEG. Quality is on a 0-1 scale."""
