from dataclasses import dataclass

JPEG_MEDIA_TYPE = "image/jpeg"


@dataclass(frozen=True)
class ImageAsset:
    """Image bytes travelling through one scan request. Never persisted."""

    data: bytes
    media_type: str
    filename: str = "card.jpg"
    width: int | None = None
    height: int | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class CompressionAttempt:
    """One pass of the normalizer's search loop."""

    width: int
    height: int
    quality: float
    size_bytes: int
