from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Literal

FALLBACK_NOTICE = "Remote extraction unavailable, used local OCR fallback."
RAW_TEXT_SAMPLE_LENGTH = 200


@dataclass(frozen=True)
class ContactFields:
    """The twelve contact fields read from a business card. Unknown values are None."""

    name: str | None = None
    title: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    mobile: str | None = None
    website: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None

    KEYS: ClassVar[tuple[str, ...]] = (
        "name",
        "title",
        "company",
        "email",
        "phone",
        "mobile",
        "website",
        "address",
        "city",
        "state",
        "zipcode",
        "country",
    )

    def to_dict(self) -> dict[str, str | None]:
        """Return all twelve keys, None for unknown values."""
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ContactFields":
        """Read the twelve keys from a mapping; other keys are ignored."""
        values: dict[str, str | None] = {}
        for key in cls.KEYS:
            raw = data.get(key)
            values[key] = raw if raw is None or isinstance(raw, str) else str(raw)
        return cls(**values)


@dataclass(frozen=True)
class ProviderResponse:
    """A successful structured-extraction provider call."""

    body: dict[str, Any]
    text: str


@dataclass(frozen=True)
class StructuredOutcome:
    """Fields extracted by the remote vision model."""

    fields: ContactFields
    response_body: dict[str, Any] = field(default_factory=dict)
    kind: Literal["structured"] = "structured"


@dataclass(frozen=True)
class DegradedOutcome:
    """Fields derived heuristically from local OCR text."""

    fields: ContactFields
    reason: str
    raw_text_sample: str = ""
    notice: str = FALLBACK_NOTICE
    source: str = "tesseract"
    kind: Literal["degraded"] = "degraded"


ExtractionOutcome = StructuredOutcome | DegradedOutcome
