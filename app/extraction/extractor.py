"""Two-tier contact extraction: remote structured model, then local OCR."""

import base64
import json
from pathlib import Path
from typing import Any

from app.extraction import reasons
from app.extraction.base import BaseContactExtractor
from app.extraction.client_base import BaseExtractionClient
from app.extraction.exceptions import ExtractionUnavailableError, InternalExtractionError
from app.extraction.heuristics import structure_card_text
from app.extraction.models import (
    RAW_TEXT_SAMPLE_LENGTH,
    ContactFields,
    DegradedOutcome,
    ExtractionOutcome,
    StructuredOutcome,
)
from app.extraction.prompt_loader import load_prompt
from app.logging.logger import Log
from app.ocr.base import BaseOcrEngine
from app.ocr.exceptions import OcrError


class ContactExtractor(BaseContactExtractor):
    """Extracts contact fields, degrading to OCR heuristics when the provider is unusable.

    ``client`` is None when no provider credential is configured; the remote
    call is then skipped entirely. The provider is called at most once per
    image and never retried.
    """

    def __init__(
        self,
        *,
        client: BaseExtractionClient | None,
        ocr_engine: BaseOcrEngine,
        ocr_language: str = "eng",
        prompt_path: Path | None = None,
    ) -> None:
        self._client = client
        self._ocr_engine = ocr_engine
        self._ocr_language = ocr_language
        self._prompt = load_prompt(prompt_path)

    def extract(self, image: bytes, media_type: str) -> ExtractionOutcome:
        try:
            return self._extract_structured(image, media_type)
        except ExtractionUnavailableError as exc:
            Log.warning(f"Falling back to local OCR: {exc}", reason=exc.reason)
            return self._extract_with_ocr(image, exc.reason)

    def _extract_structured(self, image: bytes, media_type: str) -> StructuredOutcome:
        if self._client is None:
            raise ExtractionUnavailableError(
                reasons.MISSING_API_KEY, "No structured-extraction API key configured"
            )

        response = self._client.extract(
            image_base64=base64.b64encode(image).decode("ascii"),
            media_type=media_type,
            prompt=self._prompt,
        )
        Log.debug(f"Structured extraction raw answer:\n{response.text}")

        parsed = self._parse_json(response.text, self._client.provider)
        Log.info(f"Structured extraction complete via {self._client.provider}")
        return StructuredOutcome(
            fields=ContactFields.from_mapping(parsed),
            response_body=response.body,
        )

    def _extract_with_ocr(self, image: bytes, reason: str) -> DegradedOutcome:
        try:
            text = self._ocr_engine.recognize(
                image,
                self._ocr_language,
                progress=self._log_progress,
            )
        except OcrError as exc:
            raise InternalExtractionError(f"Local OCR fallback failed: {exc}") from exc

        fields = structure_card_text(text)
        Log.info(
            f"Local OCR fallback complete: {len(text)} chars recognized",
            reason=reason,
        )
        return DegradedOutcome(
            fields=fields,
            reason=reason,
            raw_text_sample=text[:RAW_TEXT_SAMPLE_LENGTH],
        )

    @staticmethod
    def _log_progress(fraction: float) -> None:
        Log.debug(f"OCR progress: {fraction * 100:.0f}%")

    @staticmethod
    def _parse_json(raw: str, provider: str) -> dict[str, Any]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionUnavailableError(
                reasons.invalid_response(provider), f"Invalid JSON answer: {exc}"
            ) from exc

        if not isinstance(parsed, dict):
            raise ExtractionUnavailableError(
                reasons.invalid_response(provider), "JSON answer must be an object"
            )
        return parsed
