from typing import Any, ClassVar

import httpx

from app.extraction import reasons
from app.extraction.client_base import BaseExtractionClient
from app.extraction.exceptions import ExtractionUnavailableError
from app.extraction.models import ProviderResponse
from app.logging.logger import Log


class AnthropicClientAdapter(BaseExtractionClient):
    """Structured-extraction client for the Anthropic Messages API, over httpx."""

    provider: ClassVar[str] = "anthropic"
    API_VERSION: ClassVar[str] = "2023-06-01"
    DEFAULT_BASE_URL: ClassVar[str] = "https://api.anthropic.com/v1"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        timeout_seconds: int,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    def extract(
        self,
        *,
        image_base64: str,
        media_type: str,
        prompt: str,
    ) -> ProviderResponse:
        payload = self._build_payload(image_base64, media_type, prompt)
        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                transport=self._transport,
                headers={
                    "content-type": "application/json",
                    "x-api-key": self._api_key,
                    "anthropic-version": self.API_VERSION,
                },
            ) as client:
                response = client.post("/messages", json=payload)
        except httpx.HTTPError as exc:
            Log.error(f"Anthropic request failed: {exc}")
            raise ExtractionUnavailableError(
                reasons.request_failed(self.provider),
                f"Anthropic request failed: {exc}",
            ) from exc

        if not response.is_success:
            Log.error(
                "Anthropic API error",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ExtractionUnavailableError(
                reasons.reason_for_status(self.provider, response.status_code, response.text),
                f"Anthropic API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ExtractionUnavailableError(
                reasons.invalid_response(self.provider),
                f"Anthropic returned a non-JSON body: {exc}",
                status_code=response.status_code,
            ) from exc
        if not isinstance(body, dict):
            raise ExtractionUnavailableError(
                reasons.invalid_response(self.provider),
                "Anthropic response body must be an object",
                status_code=response.status_code,
            )
        return ProviderResponse(body=body, text=self._answer_text(body))

    def _build_payload(self, image_base64: str, media_type: str, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": image_base64,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        }

    def _answer_text(self, body: dict[str, Any]) -> str:
        blocks = body.get("content")
        if not isinstance(blocks, list):
            raise ExtractionUnavailableError(
                reasons.invalid_response(self.provider),
                "Anthropic response has no content blocks",
            )
        texts = [
            block["text"]
            for block in blocks
            if isinstance(block, dict)
            and block.get("type") == "text"
            and isinstance(block.get("text"), str)
        ]
        if not texts:
            raise ExtractionUnavailableError(
                reasons.invalid_response(self.provider),
                "Anthropic returned no text content",
            )
        return "\n".join(texts)
