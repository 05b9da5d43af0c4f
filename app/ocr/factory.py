from app.config.settings import Settings
from app.ocr.base import BaseOcrEngine
from app.ocr.tesseract_adapter import TesseractOcrAdapter


class OcrEngineFactory:
    """Creates the OCR engine named in settings."""

    ENGINES: tuple[str, ...] = ("tesseract",)

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        if engine == "tesseract":
            return TesseractOcrAdapter(tesseract_cmd=settings.tesseract_cmd)
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
