"""Data extractors for the source store."""

from .base import BaseExtractor, ExtractionResult
from .firestore_extractor import FirestoreExtractor
from .json_extractor import JSONExtractor

__all__ = [
    "BaseExtractor",
    "ExtractionResult",
    "FirestoreExtractor",
    "JSONExtractor",
]
