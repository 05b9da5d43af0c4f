import io

from PIL import Image, ImageOps, UnidentifiedImageError

from app.imaging.base import BaseImageCodec, Surface
from app.imaging.exceptions import InvalidImageError


class PillowCodecAdapter(BaseImageCodec):
    """Decodes, resamples and JPEG-encodes images with Pillow."""

    def decode(self, data: bytes) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as opened:
                opened.load()
                oriented = ImageOps.exif_transpose(opened)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise InvalidImageError(f"Pillow could not decode image: {exc}") from exc

        if oriented.mode == "RGB":
            return oriented
        try:
            return oriented.convert("RGB")
        finally:
            oriented.close()

    def render(self, source: Surface, width: int, height: int) -> Image.Image:
        image = self._as_pillow(source)
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def encode(self, surface: Surface, quality: float) -> bytes:
        image = self._as_pillow(surface)
        with io.BytesIO() as buffer:
            image.save(
                buffer,
                format="JPEG",
                quality=int(round(quality * 100)),
                optimize=True,
            )
            return buffer.getvalue()

    @staticmethod
    def _as_pillow(surface: Surface) -> Image.Image:
        if not isinstance(surface, Image.Image):
            raise TypeError(f"PillowCodecAdapter cannot handle {type(surface).__name__}")
        return surface
