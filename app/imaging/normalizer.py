"""Adaptive JPEG compression that fits a card photo under a byte budget.

Search loop (bounded, sequential):
1. Decode the source once; an input already under the budget is returned as is.
2. Render the full frame at the current size and encode as JPEG at the current
   quality.
3. Stop at the first encoding within the budget.
4. Otherwise shrink both sides by one uniform factor (0.85, eased so that a side
   above 600px lands on 600px rather than below it) and drop quality by 0.1 (not
   below 0.45), then try again.
5. After MAX_ATTEMPTS passes return the smallest candidate seen. The upload itself
   is the first candidate, so the result is never larger than the input.
"""

import re
import threading
from contextlib import closing
from typing import ClassVar

from app.imaging.base import BaseImageCodec, Surface
from app.imaging.exceptions import CompressionCancelledError, InvalidImageError
from app.imaging.models import JPEG_MEDIA_TYPE, CompressionAttempt, ImageAsset
from app.logging.logger import Log

_EXTENSION_RE = re.compile(r"\.\w+$")


class ImageSizeNormalizer:
    """Re-encodes images until they fit under a byte budget, without cropping."""

    MAX_ATTEMPTS: ClassVar[int] = 6
    SCALE_STEP: ClassVar[float] = 0.85
    MIN_DIMENSION: ClassVar[float] = 600.0
    INITIAL_QUALITY: ClassVar[float] = 0.85
    MIN_QUALITY: ClassVar[float] = 0.45
    QUALITY_STEP: ClassVar[float] = 0.1

    def __init__(self, codec: BaseImageCodec) -> None:
        self._codec = codec

    def normalize(
        self,
        image: ImageAsset,
        max_bytes: int,
        cancel_event: threading.Event | None = None,
    ) -> ImageAsset:
        """Return an image no larger than max_bytes where reachable.

        Args:
            image: Uploaded image with its declared media type.
            max_bytes: Target byte budget.
            cancel_event: Optional event checked before every encode pass.

        Returns:
            The input unchanged when it already fits. Otherwise the first JPEG
            re-encoding within budget or, when the attempts run out, the smallest
            candidate seen, which is the input itself if no re-encoding beat it.

        Raises:
            InvalidImageError: if the input is not a decodable image.
            CompressionCancelledError: if cancel_event is set between passes.
        """
        if max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive, got {max_bytes}")
        if not image.media_type.lower().startswith("image/"):
            raise InvalidImageError(
                f"A valid image is required for compression, got '{image.media_type}'"
            )

        with closing(self._codec.decode(image.data)) as source:
            if image.size_bytes <= max_bytes:
                Log.debug(
                    "Image already under budget",
                    size_bytes=image.size_bytes,
                    max_bytes=max_bytes,
                )
                return ImageAsset(
                    data=image.data,
                    media_type=image.media_type,
                    filename=image.filename,
                    width=source.width,
                    height=source.height,
                )
            return self._search(source, image, max_bytes, cancel_event)

    def _search(
        self,
        source: Surface,
        image: ImageAsset,
        max_bytes: int,
        cancel_event: threading.Event | None,
    ) -> ImageAsset:
        width = float(source.width)
        height = float(source.height)
        quality = self.INITIAL_QUALITY
        best: tuple[bytes, CompressionAttempt] | None = None
        best_size = image.size_bytes

        for attempt_number in range(1, self.MAX_ATTEMPTS + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise CompressionCancelledError(
                    f"Compression cancelled before attempt {attempt_number}"
                )

            target_width = max(1, round(width))
            target_height = max(1, round(height))
            with closing(self._codec.render(source, target_width, target_height)) as surface:
                encoded = self._codec.encode(surface, quality)

            attempt = CompressionAttempt(
                width=target_width,
                height=target_height,
                quality=quality,
                size_bytes=len(encoded),
            )
            Log.debug(
                f"Compression attempt {attempt_number}/{self.MAX_ATTEMPTS}",
                width=attempt.width,
                height=attempt.height,
                quality=attempt.quality,
                size_bytes=attempt.size_bytes,
            )

            if attempt.size_bytes < best_size:
                best = (encoded, attempt)
                best_size = attempt.size_bytes

            if attempt.size_bytes <= max_bytes:
                Log.info(
                    f"Compressed image from {image.size_bytes} to {attempt.size_bytes} bytes "
                    f"in {attempt_number} attempt(s)"
                )
                return self._to_asset(encoded, attempt, image.filename)

            scale = self.next_scale(width, height)
            width *= scale
            height *= scale
            quality = self.next_quality(quality)

        if best is None:
            Log.warning(
                f"No re-encoding beat the upload after {self.MAX_ATTEMPTS} attempts, "
                "returning it unchanged",
                size_bytes=image.size_bytes,
                max_bytes=max_bytes,
            )
            return ImageAsset(
                data=image.data,
                media_type=image.media_type,
                filename=image.filename,
                width=source.width,
                height=source.height,
            )

        encoded, attempt = best
        Log.warning(
            f"Image still over budget after {self.MAX_ATTEMPTS} attempts, "
            "returning smallest candidate",
            size_bytes=attempt.size_bytes,
            max_bytes=max_bytes,
        )
        return self._to_asset(encoded, attempt, image.filename)

    @classmethod
    def next_scale(cls, width: float, height: float) -> float:
        """Uniform shrink factor for the next pass.

        A side still above MIN_DIMENSION is not scaled below it; once no side is
        above the floor both shrink by SCALE_STEP. One factor for both sides keeps
        the aspect ratio exact.
        """
        scale = cls.SCALE_STEP
        for side in (width, height):
            if side > cls.MIN_DIMENSION:
                scale = max(scale, cls.MIN_DIMENSION / side)
        return scale

    @classmethod
    def next_quality(cls, quality: float) -> float:
        return max(cls.MIN_QUALITY, round(quality - cls.QUALITY_STEP, 2))

    @staticmethod
    def _to_asset(data: bytes, attempt: CompressionAttempt, filename: str) -> ImageAsset:
        return ImageAsset(
            data=data,
            media_type=JPEG_MEDIA_TYPE,
            filename=jpeg_filename(filename),
            width=attempt.width,
            height=attempt.height,
        )


def jpeg_filename(filename: str) -> str:
    """Swap the extension of filename for .jpg, appending one if missing."""
    if _EXTENSION_RE.search(filename):
        return _EXTENSION_RE.sub(".jpg", filename)
    return f"{filename}.jpg"
