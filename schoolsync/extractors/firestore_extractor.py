"""Firestore collection extractor."""

import logging
from typing import Any, Optional
from datetime import date, datetime, timezone

from .base import BaseExtractor, ExtractionResult
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def _to_plain(value: Any) -> Any:
    """Convert Firestore values (timestamps, references) to JSON-friendly ones."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    # DocumentReference
    if hasattr(value, "path") and hasattr(value, "collection"):
        return value.path
    return value


class FirestoreExtractor(BaseExtractor):
    """
    Extractor for a Firestore collection.

    Reads the whole collection with one streamed query and keeps it in
    memory. Credentials are resolved by the Google client library
    (``GOOGLE_APPLICATION_CREDENTIALS`` or the ambient service account).
    """

    def __init__(
        self,
        collection: str,
        project: Optional[str] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize the Firestore extractor.

        Args:
            collection: Collection to read
            project: Google Cloud project id
            client: Pre-built ``google.cloud.firestore.Client``
        """
        super().__init__(collection, service="firestore")
        self.project = project
        self._client = client

    def _create_client(self) -> Any:
        try:
            from google.cloud import firestore
        except ImportError as e:
            raise ConfigurationError(
                "google-cloud-firestore is not installed; install schoolsync[firestore] "
                "or pass --source-file"
            ) from e

        try:
            return firestore.Client(project=self.project)
        except Exception as e:
            raise ConfigurationError(f"Firestore is not initialized: {e}") from e

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def extract(self) -> ExtractionResult:
        """Read every document of the collection."""
        self.reset()
        started_at = datetime.now(timezone.utc)

        errors = self.validate_source()
        if errors:
            raise ConfigurationError("; ".join(errors))

        try:
            documents = list(self.client.collection(self.collection).stream())
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Cannot read Firestore collection {self.collection!r}: {e}") from e

        records = [
            self.create_record(doc.id, _to_plain(doc.to_dict() or {}))
            for doc in documents
        ]

        logger.info(f"Extracted {len(records)} {self.collection} records from Firestore")
        return self.get_extraction_result(records, started_at)
