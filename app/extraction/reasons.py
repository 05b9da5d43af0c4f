"""Reason codes for falling back from structured extraction to local OCR.

Provider-specific codes are prefixed with the provider name, e.g.
``anthropic_unauthorized``.
"""

import re

MISSING_API_KEY = "missing_api_key"

_INSUFFICIENT_CREDIT_RE = re.compile(
    r"credit balance is too low|insufficient_quota|exceeded your current quota",
    re.IGNORECASE,
)


def reason_for_status(provider: str, status_code: int, body: str) -> str:
    """Map a non-success provider response to a fallback reason."""
    if 400 <= status_code < 500 and _INSUFFICIENT_CREDIT_RE.search(body or ""):
        return f"{provider}_insufficient_credit"
    if status_code == 401:
        return f"{provider}_unauthorized"
    if status_code == 403:
        return f"{provider}_forbidden"
    return f"{provider}_error"


def request_failed(provider: str) -> str:
    """Reason for a call that produced no response (connect error, timeout)."""
    return f"{provider}_request_failed"


def invalid_response(provider: str) -> str:
    """Reason for a success response the model answer cannot be read from."""
    return f"{provider}_invalid_response"
