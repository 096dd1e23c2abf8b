"""JSON export extractor."""

import json
import logging
from pathlib import Path
from typing import Any, List, Union
from datetime import datetime, timezone

from .base import BaseExtractor, ExtractionResult
from ..errors import ConfigurationError
from ..models.record import SourceRecord

logger = logging.getLogger(__name__)


class JSONExtractor(BaseExtractor):
    """
    Extractor for JSON exports of a Firestore collection.

    Two layouts are accepted:
    - a list of documents, each optionally carrying an ``id`` field
    - an object mapping document ids to their fields

    A top-level object with a key equal to the collection name is unwrapped
    first, so a multi-collection export can be read one collection at a time.
    """

    def __init__(self, path: Union[str, Path], collection: str = "students", encoding: str = "utf-8"):
        super().__init__(collection, service="json")
        self.path = Path(path)
        self.encoding = encoding

    def extract(self) -> ExtractionResult:
        """Read every document from the export file."""
        self.reset()
        started_at = datetime.now(timezone.utc)

        try:
            with open(self.path, encoding=self.encoding) as f:
                content = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot read source export {self.path}: {e}") from e

        records = self._parse(content)
        logger.info(f"Extracted {len(records)} {self.collection} records from {self.path}")
        return self.get_extraction_result(records, started_at)

    def _parse(self, content: Any) -> List[SourceRecord]:
        if isinstance(content, dict) and isinstance(content.get(self.collection), (list, dict)):
            content = content[self.collection]

        records = []
        if isinstance(content, list):
            for position, item in enumerate(content):
                if not isinstance(item, dict):
                    self.add_warning(f"Skipping non-object entry at position {position}")
                    continue
                records.append(self.create_record(item.get("id"), dict(item)))

        elif isinstance(content, dict):
            for doc_id, fields in content.items():
                if not isinstance(fields, dict):
                    self.add_warning(f"Skipping non-object document {doc_id!r}")
                    continue
                records.append(self.create_record(doc_id, dict(fields)))

        else:
            raise ConfigurationError(f"Unsupported export layout in {self.path}")

        return records
