"""Durable checkpoint of per-record migration outcomes."""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Set, Union

from ..errors import CheckpointError
from ..models.migration import DEFAULT_OUTPUT_PATH
from ..models.record import MigrationResult, ResultStatus

logger = logging.getLogger(__name__)


class CheckpointStore:
    """
    JSON-array checkpoint file, rewritten in full after every result.

    Writes go to a temporary file in the same directory which is then
    renamed over the checkpoint, so the file on disk is always either the
    previous or the new complete snapshot. A lock serializes appends from
    concurrent workers.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_OUTPUT_PATH):
        self._path = Path(path).resolve()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, set_aside: bool = True) -> List[MigrationResult]:
        """
        Read the persisted results.

        A missing file is a fresh run. An unreadable file is treated as a
        fresh run too; with ``set_aside`` it is first renamed to
        ``<name>.corrupt-<timestamp>`` so the next flush cannot overwrite it.
        """
        if not self._path.exists():
            logger.info(f"No checkpoint at {self._path}, starting fresh")
            return []

        try:
            with open(self._path, encoding="utf-8") as f:
                entries = json.load(f)
            if not isinstance(entries, list):
                raise CheckpointError("Checkpoint root is not a JSON array")
            results = [MigrationResult.from_dict(entry) for entry in entries]
        except (OSError, ValueError, CheckpointError) as e:
            logger.warning(f"Unreadable checkpoint {self._path}: {e}")
            if set_aside:
                backup = self._set_aside()
                logger.warning(f"Moved unreadable checkpoint to {backup}, starting fresh")
            return []

        logger.info(f"Loaded {len(results)} checkpoint entries from {self._path}")
        return results

    @staticmethod
    def seen_success_keys(results: List[MigrationResult]) -> Set[str]:
        """Keys that already have a success entry."""
        return {r.uid for r in results if r.status == ResultStatus.SUCCESS}

    def append_and_flush(
        self,
        results: List[MigrationResult],
        result: MigrationResult
    ) -> List[MigrationResult]:
        """Append ``result`` to ``results`` and persist the whole list."""
        with self._lock:
            results.append(result)
            self._write(results)
        return results

    def _write(self, results: List[MigrationResult]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=str(self._path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([r.to_dict() for r in results], f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _set_aside(self) -> Path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        backup = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        os.replace(self._path, backup)
        return backup
