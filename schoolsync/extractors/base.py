"""Base extractor interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from ..models.record import SourceRecord

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """A full in-memory snapshot of one source collection."""
    collection: str
    records: List[SourceRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def total_extracted(self) -> int:
        return len(self.records)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "collection": self.collection,
            "total_extracted": self.total_extracted,
            "warnings": self.warnings,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


class BaseExtractor(ABC):
    """
    Base class for source extractors.

    An extractor reads every document of one collection in a single bulk
    read. Failing to reach the source raises ConfigurationError, which
    aborts the run before any record is processed.
    """

    def __init__(self, collection: str, service: str):
        """
        Initialize the extractor.

        Args:
            collection: Source collection name
            service: Source service name
        """
        self.collection = collection
        self.service = service
        self._warnings: List[str] = []

    @abstractmethod
    def extract(self) -> ExtractionResult:
        """
        Extract all documents from the collection.

        Returns:
            ExtractionResult containing all extracted records
        """
        pass

    def validate_source(self) -> List[str]:
        """
        Validate the source configuration.

        Returns:
            List of validation error messages
        """
        errors = []

        if not self.collection:
            errors.append("Source collection name is required")

        return errors

    def create_record(self, id: Optional[str], data: Dict[str, Any]) -> SourceRecord:
        """Create a SourceRecord for a document of this collection."""
        return SourceRecord(
            id=str(id) if id is not None else None,
            data=data,
            source_service=self.service,
            source_entity=self.collection,
        )

    def add_warning(self, message: str) -> None:
        """Add a warning to the extraction."""
        self._warnings.append(message)
        logger.warning(f"Extraction warning: {message}")

    def get_extraction_result(
        self,
        records: List[SourceRecord],
        started_at: Optional[datetime] = None
    ) -> ExtractionResult:
        """Create an ExtractionResult from extracted records."""
        return ExtractionResult(
            collection=self.collection,
            records=records,
            warnings=self._warnings.copy(),
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )

    def reset(self) -> None:
        """Reset the extractor state."""
        self._warnings = []
