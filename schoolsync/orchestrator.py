"""Migration orchestrator - coordinates the user migration run."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigurationError, MappingError
from .models.migration import MigrationConfig, MigrationSummary
from .models.record import SourceRecord, MigrationResult, ResultStatus
from .services.mapper import FieldMapper
from .services.checkpoint import CheckpointStore
from .services.target import ExistenceChecker, RecordCreator
from .services.throttle import ConcurrencyController
from .extractors.base import BaseExtractor
from .loaders.base import BaseLoader

logger = logging.getLogger(__name__)

Candidate = Tuple[int, SourceRecord]


class MigrationOrchestrator:
    """
    Orchestrates a resumable, rate-limited migration run.

    Handles:
    - Loading the source snapshot and the checkpoint
    - Skipping keys the checkpoint already marks as migrated
    - Per-record mapping, existence check and creation through a bounded pool
    - Persisting one checkpoint entry per processed record
    - Summarizing the run
    """

    def __init__(
        self,
        extractor: BaseExtractor,
        loader: Optional[BaseLoader],
        config: Optional[MigrationConfig] = None,
        checkpoint: Optional[CheckpointStore] = None,
        mapper: Optional[FieldMapper] = None,
        controller: Optional[ConcurrencyController] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            extractor: Source data provider
            loader: Target API client (may be None for a dry run)
            config: Migration configuration
            checkpoint: Checkpoint store (defaults to config.output_path)
            mapper: Field mapper
            controller: Concurrency controller (defaults from config)
        """
        self.config = config or MigrationConfig()
        self.extractor = extractor
        self.loader = loader
        self.checkpoint = checkpoint or CheckpointStore(self.config.output_path)
        self.mapper = mapper or FieldMapper()
        self.controller = controller or ConcurrencyController(
            width=self.config.concurrency,
            delay_seconds=self.config.delay_seconds,
        )
        self.existence_checker = ExistenceChecker(loader) if loader is not None else None
        self.creator = RecordCreator(loader) if loader is not None else None

        # Runtime state
        self._results: List[MigrationResult] = []

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def run_migration(self) -> MigrationSummary:
        """
        Run the migration.

        Returns:
            MigrationSummary with run totals

        Raises:
            ConfigurationError: if the source or target cannot be reached
        """
        summary = MigrationSummary(dry_run=self.dry_run, output=str(self.checkpoint.path))

        records = self._prepare()
        summary.total = len(records)

        self._results = self.checkpoint.load()
        seen = self.checkpoint.seen_success_keys(self._results)

        candidates: List[Candidate] = []
        for index, record in enumerate(records):
            if record.unique_key in seen:
                summary.already_migrated += 1
                continue
            candidates.append((index, record))

        logger.info(
            f"Migrating {len(candidates)} of {len(records)} {self.extractor.collection} records "
            f"({summary.already_migrated} already migrated, width={self.controller.width}, "
            f"dry_run={self.dry_run})"
        )

        outcomes = self.controller.run(candidates, self._process_candidate)

        summary.processed = len(outcomes)
        summary.created = sum(1 for r in outcomes if r.status == ResultStatus.SUCCESS)
        summary.failed = sum(1 for r in outcomes if r.status == ResultStatus.FAILURE)
        summary.skipped = summary.already_migrated + sum(
            1 for r in outcomes if r.status == ResultStatus.SKIPPED
        )
        summary.completed_at = datetime.now(timezone.utc)

        logger.info(f"Migration finished: {summary.to_dict()}")
        return summary

    def _prepare(self) -> List[SourceRecord]:
        """Reach both collaborators before anything is dispatched."""
        if not self.dry_run:
            if self.loader is None:
                raise ConfigurationError("No target client configured")
            if not self.loader.validate_connection():
                raise ConfigurationError(f"Failed to connect to {self.loader.target_service}")

        result = self.extractor.extract()
        logger.info(f"Loaded {result.total_extracted} records from {self.extractor.collection}")
        logger.debug(f"Extraction: {result.to_dict()}")
        return result.records

    def preview(self, records: List[SourceRecord]) -> List[Dict[str, Any]]:
        """
        Map records without contacting the target.

        Returns:
            One entry per record: ``{"index", "data"}`` with the create input,
            or ``{"index", "uid", "error"}`` when the record cannot be mapped
        """
        previews = []
        for index, record in enumerate(records):
            try:
                previews.append({"index": index, "data": self.mapper.map(record).to_input()})
            except MappingError as e:
                previews.append({"index": index, "uid": record.unique_key, "error": str(e)})
        return previews

    def _process_candidate(self, candidate: Candidate) -> MigrationResult:
        """Take one candidate to a terminal state and checkpoint it."""
        result = self._evaluate(*candidate)
        self.checkpoint.append_and_flush(self._results, result)

        if result.status == ResultStatus.FAILURE:
            logger.warning(f"[{result.index}] {result.uid or '<no uid>'} failed: {result.error}")
        else:
            logger.debug(f"[{result.index}] {result.uid} -> {result.status.value}")
        return result

    def _evaluate(self, index: int, record: SourceRecord) -> MigrationResult:
        uid = record.unique_key or ""
        email = record.get_str("email")

        try:
            payload = self.mapper.map(record)

            if self.dry_run:
                return MigrationResult(
                    index=index,
                    uid=payload.uid,
                    status=ResultStatus.DRY_RUN,
                    email=payload.email,
                )

            existing = self.existence_checker.find_by_key(payload.uid)
            if existing is not None:
                return MigrationResult(
                    index=index,
                    uid=payload.uid,
                    status=ResultStatus.SKIPPED,
                    email=existing.email,
                    reason="exists",
                )

            created = self.creator.create(payload)
            return MigrationResult(
                index=index,
                uid=payload.uid,
                status=ResultStatus.SUCCESS,
                email=created.email,
            )

        except Exception as e:
            return MigrationResult(
                index=index,
                uid=uid,
                status=ResultStatus.FAILURE,
                email=email,
                error=str(e) or type(e).__name__,
            )

