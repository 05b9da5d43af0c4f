from app.extraction.base import BaseContactExtractor
from app.extraction.extractor import ContactExtractor
from app.extraction.factory import ExtractorFactory
from app.extraction.models import (
    ContactFields,
    DegradedOutcome,
    ExtractionOutcome,
    StructuredOutcome,
)

__all__ = [
    "BaseContactExtractor",
    "ContactExtractor",
    "ContactFields",
    "DegradedOutcome",
    "ExtractionOutcome",
    "ExtractorFactory",
    "StructuredOutcome",
]
