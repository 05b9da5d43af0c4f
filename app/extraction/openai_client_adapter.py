from typing import ClassVar

import httpx
import openai

from app.extraction import reasons
from app.extraction.client_base import BaseExtractionClient
from app.extraction.exceptions import ExtractionUnavailableError
from app.extraction.models import ProviderResponse
from app.logging.logger import Log


class OpenAIClientAdapter(BaseExtractionClient):
    """Structured-extraction client built on the OpenAI-compatible chat API."""

    provider: ClassVar[str] = "openai"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def extract(
        self,
        *,
        image_base64: str,
        media_type: str,
        prompt: str,
    ) -> ProviderResponse:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": f"data:{media_type};base64,{image_base64}",
                                },
                            },
                            {"type": "text", "text": prompt},
                        ],
                    }
                ],
            )
        except openai.APIStatusError as exc:
            Log.error("OpenAI API error", status_code=exc.status_code, body=exc.message)
            raise ExtractionUnavailableError(
                reasons.reason_for_status(self.provider, exc.status_code, exc.message),
                f"OpenAI API returned {exc.status_code}",
                status_code=exc.status_code,
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            Log.error(f"OpenAI request failed: {exc}")
            raise ExtractionUnavailableError(
                reasons.request_failed(self.provider),
                f"OpenAI network error: {exc}",
            ) from exc
        except openai.APIError as exc:
            raise ExtractionUnavailableError(
                reasons.reason_for_status(self.provider, 500, str(exc)),
                f"OpenAI API error: {exc}",
            ) from exc

        if not response.choices:
            raise ExtractionUnavailableError(
                reasons.invalid_response(self.provider), "OpenAI returned no choices"
            )
        content = response.choices[0].message.content
        if content is None:
            raise ExtractionUnavailableError(
                reasons.invalid_response(self.provider), "OpenAI returned empty response"
            )
        return ProviderResponse(body=response.model_dump(), text=content)
