from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.extraction.models import ContactFields


@dataclass
class BusinessCardRecord:
    """Represents a row from the business_cards table."""

    id: int
    user_id: int
    organization_id: int | None
    fields: ContactFields
    source: str
    image_url: str | None = None
    fallback_reason: str | None = None
    extracted_data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
