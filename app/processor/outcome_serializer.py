import json
from typing import Any

from app.extraction.models import DegradedOutcome, ExtractionOutcome, StructuredOutcome


class OutcomeSerializer:
    """Converts an extraction outcome to the JSON-serializable scan response body."""

    def serialize(self, outcome: ExtractionOutcome) -> dict[str, Any]:
        """Structured outcomes pass the provider body through verbatim.

        Degraded outcomes are shaped like a provider message: one text block
        holding the twelve fields as JSON, plus fallback metadata.
        """
        if isinstance(outcome, StructuredOutcome):
            return outcome.response_body
        if isinstance(outcome, DegradedOutcome):
            return self._degraded_body(outcome)
        raise TypeError(f"Unsupported outcome type: {type(outcome).__name__}")

    def _degraded_body(self, outcome: DegradedOutcome) -> dict[str, Any]:
        return {
            "content": [
                {
                    "type": "text",
                    "text": json.dumps(outcome.fields.to_dict(), indent=2),
                }
            ],
            "metadata": {
                "source": outcome.source,
                "rawTextSample": outcome.raw_text_sample,
                "fallbackReason": outcome.reason,
                "fallbackNotice": outcome.notice,
            },
            "fallbackReason": outcome.reason,
        }
