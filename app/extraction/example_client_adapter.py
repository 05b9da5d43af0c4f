"""Example structured-extraction client.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import Any, ClassVar

from app.extraction.client_base import BaseExtractionClient
from app.extraction.models import ProviderResponse


class ExampleClientAdapter(BaseExtractionClient):
    """Returns a fixed card answer shaped like an Anthropic message. No network calls."""

    provider: ClassVar[str] = "example"

    DEFAULT_FIELDS: ClassVar[dict[str, str | None]] = {
        "name": "Jane Doe",
        "title": "VP Engineering",
        "company": "Acme Corp",
        "email": "jane.doe@acme.com",
        "phone": "+1 555 123-4567",
        "mobile": None,
        "website": "https://www.acme.com",
        "address": "123 Main Street",
        "city": "Springfield",
        "state": "IL",
        "zipcode": "62704",
        "country": "United States",
    }

    def extract(
        self,
        *,
        image_base64: str,
        media_type: str,
        prompt: str,
    ) -> ProviderResponse:
        _ = image_base64, media_type, prompt
        text = json.dumps(self.DEFAULT_FIELDS)
        body: dict[str, Any] = {
            "type": "message",
            "role": "assistant",
            "model": "example",
            "content": [{"type": "text", "text": text}],
        }
        return ProviderResponse(body=body, text=text)
