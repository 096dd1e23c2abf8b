"""Migration configuration and run summary models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
from datetime import datetime, timezone
import os

from ..errors import ConfigurationError


DEFAULT_COLLECTION = "students"
DEFAULT_CONCURRENCY = 3
DEFAULT_DELAY_SECONDS = 0.2
DEFAULT_OUTPUT_PATH = "migration-results.json"


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class MigrationConfig:
    """Configuration for a migration run."""
    collection: str = DEFAULT_COLLECTION
    concurrency: int = DEFAULT_CONCURRENCY
    dry_run: bool = False
    delay_seconds: float = DEFAULT_DELAY_SECONDS
    output_path: str = DEFAULT_OUTPUT_PATH

    # Source: a JSON export if set, Firestore otherwise
    source_file: Optional[str] = None
    firebase_project: Optional[str] = None

    # Target
    hygraph_endpoint: Optional[str] = None
    hygraph_token: Optional[str] = None
    request_timeout: float = 30.0
    max_retries: int = 2

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (token masked)."""
        return {
            "collection": self.collection,
            "concurrency": self.concurrency,
            "dry_run": self.dry_run,
            "delay_seconds": self.delay_seconds,
            "output_path": self.output_path,
            "source_file": self.source_file,
            "firebase_project": self.firebase_project,
            "hygraph_endpoint": self.hygraph_endpoint,
            "hygraph_token": self.masked_token,
            "request_timeout": self.request_timeout,
            "max_retries": self.max_retries,
        }

    @property
    def masked_token(self) -> Optional[str]:
        if not self.hygraph_token:
            return None
        return f"{self.hygraph_token[:6]}..."

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["MigrationConfig"] = None) -> "MigrationConfig":
        """Create from dictionary representation.

        Keys missing from ``data`` keep the value they have in ``base``
        (or the dataclass default).
        """
        base = base or cls()
        try:
            return cls(
                collection=data.get("collection", base.collection),
                concurrency=int(data.get("concurrency", base.concurrency)),
                dry_run=_as_bool(data.get("dry_run", base.dry_run)),
                delay_seconds=float(data.get("delay_seconds", base.delay_seconds)),
                output_path=data.get("output_path", base.output_path),
                source_file=data.get("source_file", base.source_file),
                firebase_project=data.get("firebase_project", base.firebase_project),
                hygraph_endpoint=data.get("hygraph_endpoint", base.hygraph_endpoint),
                hygraph_token=data.get("hygraph_token", base.hygraph_token),
                request_timeout=float(data.get("request_timeout", base.request_timeout)),
                max_retries=int(data.get("max_retries", base.max_retries)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MigrationConfig":
        """Create from environment variables."""
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        env_keys = {
            "MIGRATION_COLLECTION": "collection",
            "MIGRATION_CONCURRENCY": "concurrency",
            "MIGRATION_DRY_RUN": "dry_run",
            "MIGRATION_DELAY_SECONDS": "delay_seconds",
            "MIGRATION_OUTPUT": "output_path",
            "MIGRATION_SOURCE_FILE": "source_file",
            "FIREBASE_PROJECT_ID": "firebase_project",
            "HYGRAPH_ENDPOINT": "hygraph_endpoint",
            "HYGRAPH_TOKEN": "hygraph_token",
        }
        for env_key, config_key in env_keys.items():
            if env.get(env_key):
                data[config_key] = env[env_key]

        return cls.from_dict(data)

    def validate(self) -> List[str]:
        """Return a list of configuration problems."""
        errors = []

        if not self.collection:
            errors.append("Source collection name is required")

        if not self.dry_run:
            if not self.hygraph_endpoint:
                errors.append("HYGRAPH_ENDPOINT is not set")
            if not self.hygraph_token:
                errors.append("HYGRAPH_TOKEN is not set")

        if self.delay_seconds < 0:
            errors.append("delay_seconds must not be negative")

        return errors


@dataclass
class MigrationSummary:
    """Totals of a completed migration run."""
    total: int = 0
    processed: int = 0
    created: int = 0
    failed: int = 0
    skipped: int = 0
    already_migrated: int = 0
    output: str = ""
    dry_run: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total": self.total,
            "processed": self.processed,
            "created": self.created,
            "failed": self.failed,
            "skipped": self.skipped,
            "already_migrated": self.already_migrated,
            "output": self.output,
            "dry_run": self.dry_run,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }
