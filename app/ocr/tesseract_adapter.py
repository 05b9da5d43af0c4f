import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from app.ocr.base import BaseOcrEngine, ProgressCallback
from app.ocr.exceptions import OcrError


class TesseractOcrAdapter(BaseOcrEngine):
    """Recognizes card text with the Tesseract binary via pytesseract."""

    def __init__(self, tesseract_cmd: str = "") -> None:
        self._tesseract_cmd = tesseract_cmd

    def recognize(
        self,
        image: bytes,
        language: str,
        progress: ProgressCallback | None = None,
    ) -> str:
        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
        if progress is not None:
            progress(0.0)
        try:
            with Image.open(io.BytesIO(image)) as pil_image:
                text = pytesseract.image_to_string(pil_image, lang=language)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise OcrError(f"tesseract recognition failed: {exc}") from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise OcrError(f"tesseract could not read image: {exc}") from exc
        if progress is not None:
            progress(1.0)
        return text
