from dataclasses import dataclass

from app.extraction.models import ExtractionOutcome
from app.imaging.models import ImageAsset


@dataclass(frozen=True)
class ScanResult:
    """Output of one scan: the image actually sent for extraction and the outcome."""

    image: ImageAsset
    outcome: ExtractionOutcome
