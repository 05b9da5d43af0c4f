import base64
import binascii
import mimetypes
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.database.models import BusinessCardRecord
from app.extraction.models import ContactFields
from app.imaging.models import ImageAsset
from app.processor.exceptions import InvalidCardRequestError, InvalidScanRequestError


class ScanRequest(BaseModel):
    """Body of POST /scan."""

    model_config = ConfigDict(populate_by_name=True)

    image: str = Field(min_length=1)
    mime_type: str = Field(alias="mimeType", min_length=1)


def parse_scan_request(raw_body: bytes) -> ImageAsset:
    """Validate a raw POST /scan body and decode its image.

    Raises:
        InvalidScanRequestError: for a missing body, malformed JSON, missing
            fields, a non-image media type or invalid base64.
    """
    if not raw_body.strip():
        raise InvalidScanRequestError("Missing request body")
    try:
        request = ScanRequest.model_validate_json(raw_body)
    except ValidationError as exc:
        raise InvalidScanRequestError("Image data and mimeType are required") from exc

    media_type = request.mime_type.strip().lower()
    if not media_type.startswith("image/"):
        raise InvalidScanRequestError(f"Unsupported mimeType '{request.mime_type}'")

    encoded = request.image
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]
    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidScanRequestError("Image data must be base64 encoded") from exc
    if not data:
        raise InvalidScanRequestError("Image data is empty")

    extension = mimetypes.guess_extension(media_type) or ""
    return ImageAsset(data=data, media_type=media_type, filename=f"card{extension}")


class CardFieldsBody(BaseModel):
    """The twelve editable contact fields; any may be omitted."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

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


class CreateCardRequest(CardFieldsBody):
    """Body of POST /business-cards."""

    image_url: str | None = Field(default=None, alias="imageUrl")
    extracted_data: dict[str, Any] | None = Field(default=None, alias="extractedData")

    def contact_fields(self) -> ContactFields:
        return ContactFields(**self.model_dump(include=set(ContactFields.KEYS)))


class UpdateCardRequest(CardFieldsBody):
    """Body of PATCH /business-cards/{id}. Only fields present are changed."""

    def changes(self) -> dict[str, str | None]:
        return self.model_dump(include=set(ContactFields.KEYS), exclude_unset=True)


CardBodyT = TypeVar("CardBodyT", bound=CardFieldsBody)


def parse_card_body(model: type[CardBodyT], raw_body: bytes) -> CardBodyT:
    """Validate a raw card body against model.

    Raises:
        InvalidCardRequestError: for a missing body, malformed JSON or a field
            of the wrong type.
    """
    if not raw_body.strip():
        raise InvalidCardRequestError("Missing request body")
    try:
        return model.model_validate_json(raw_body)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "body"
        raise InvalidCardRequestError(f"Invalid card data at '{location}': {first['msg']}") from exc


def card_to_json(card: BusinessCardRecord) -> dict[str, Any]:
    """Render a stored card with camelCase keys, as the card list UI reads it."""
    return {
        "id": card.id,
        "userId": card.user_id,
        "organizationId": card.organization_id,
        **card.fields.to_dict(),
        "imageUrl": card.image_url,
        "source": card.source,
        "fallbackReason": card.fallback_reason,
        "extractedData": card.extracted_data,
        "createdAt": card.created_at.isoformat() if card.created_at else None,
        "updatedAt": card.updated_at.isoformat() if card.updated_at else None,
    }
