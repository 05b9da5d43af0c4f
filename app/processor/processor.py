import threading
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from app.config.settings import Settings
from app.database.models import BusinessCardRecord
from app.database.repositories.business_card_repository import BusinessCardRepository
from app.extraction.base import BaseContactExtractor
from app.extraction.factory import ExtractorFactory
from app.extraction.models import ContactFields
from app.imaging.factory import ImageCodecFactory
from app.imaging.models import ImageAsset
from app.imaging.normalizer import ImageSizeNormalizer
from app.logging.logger import Log
from app.processor.exceptions import CardNotFoundError, StorageDisabledError
from app.processor.models import ScanResult
from app.processor.outcome_serializer import OutcomeSerializer


class CardScanProcessor:
    """Runs the card upload workflow.

    Pipeline: normalize size -> extract contact fields. Card operations persist
    what the caller saves from a scan.
    """

    def __init__(
        self,
        normalizer: ImageSizeNormalizer,
        extractor: BaseContactExtractor,
        serializer: OutcomeSerializer,
        max_upload_bytes: int,
        card_repo: BusinessCardRepository | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._extractor = extractor
        self._serializer = serializer
        self._max_upload_bytes = max_upload_bytes
        self._card_repo = card_repo

    def process(
        self,
        image: ImageAsset,
        cancel_event: threading.Event | None = None,
    ) -> ScanResult:
        """Fit the image under the upload budget, then extract its contact fields."""
        Log.info(
            f"Scanning {image.filename} ({image.media_type}, {image.size_bytes} bytes)"
        )
        normalized = self._normalizer.normalize(
            image,
            self._max_upload_bytes,
            cancel_event=cancel_event,
        )
        outcome = self._extractor.extract(normalized.data, normalized.media_type)
        Log.info(f"Scan of {normalized.filename} finished: {outcome.kind}")
        return ScanResult(image=normalized, outcome=outcome)

    def response_body(self, result: ScanResult) -> dict[str, object]:
        return self._serializer.serialize(result.outcome)

    def create_card(
        self,
        user_id: int,
        organization_id: int | None,
        fields: ContactFields,
        *,
        image_url: str | None = None,
        extracted_data: dict[str, Any] | None = None,
    ) -> BusinessCardRecord:
        """Save a card owned by user_id.

        A scan response body carrying ``fallbackReason`` marks the card as
        coming from the OCR fallback.

        Raises:
            StorageDisabledError: if no card repository is configured.
        """
        repo = self._require_repo()
        extracted = extracted_data or {}
        reason = extracted.get("fallbackReason")
        fallback_reason = reason if isinstance(reason, str) and reason else None
        card = repo.create(
            user_id,
            organization_id,
            fields,
            source="fallback" if fallback_reason else "structured",
            image_url=image_url,
            fallback_reason=fallback_reason,
            extracted_data=extracted,
        )
        Log.info(f"Stored card {card.id} for user {user_id}")
        return card

    def cards_for_user(self, user_id: int) -> list[BusinessCardRecord]:
        return self._require_repo().list_for_user(user_id)

    def cards_for_organization(self, organization_id: int) -> list[BusinessCardRecord]:
        return self._require_repo().list_for_organization(organization_id)

    def update_card(
        self,
        card_id: int,
        user_id: int,
        changes: Mapping[str, str | None],
    ) -> BusinessCardRecord:
        """Overwrite the given contact fields of a card owned by user_id.

        Raises:
            CardNotFoundError: if the card does not exist or belongs to another user.
        """
        repo = self._require_repo()
        card = self._owned_card(repo, card_id, user_id)
        repo.update_fields(card_id, replace(card.fields, **changes))
        Log.info(f"Updated card {card_id}", fields=sorted(changes))
        return repo.find_by_id(card_id)

    def delete_card(self, card_id: int, user_id: int) -> None:
        """Delete a card owned by user_id.

        Raises:
            CardNotFoundError: if the card does not exist or belongs to another user.
        """
        repo = self._require_repo()
        self._owned_card(repo, card_id, user_id)
        repo.delete(card_id)
        Log.info(f"Deleted card {card_id} for user {user_id}")

    def _require_repo(self) -> BusinessCardRepository:
        if self._card_repo is None:
            raise StorageDisabledError("Card storage is disabled (DB_ENABLED=false)")
        return self._card_repo

    @staticmethod
    def _owned_card(
        repo: BusinessCardRepository, card_id: int, user_id: int
    ) -> BusinessCardRecord:
        card = repo.find_by_id(card_id)
        # other users' cards are reported as missing
        if card.user_id != user_id:
            raise CardNotFoundError(f"Card {card_id} not found")
        return card


def build_processor(settings: Settings) -> CardScanProcessor:
    """Build a CardScanProcessor with all required adapters."""
    normalizer = ImageSizeNormalizer(ImageCodecFactory.create(settings))
    extractor = ExtractorFactory.create(settings)
    card_repo = BusinessCardRepository() if settings.db_enabled else None
    return CardScanProcessor(
        normalizer=normalizer,
        extractor=extractor,
        serializer=OutcomeSerializer(),
        max_upload_bytes=settings.max_upload_bytes,
        card_repo=card_repo,
    )
