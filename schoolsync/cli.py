"""Command-line interface for the Firestore to Hygraph user migration."""

import argparse
import json
import logging
import sys
from collections import Counter
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .extractors.base import BaseExtractor
from .extractors.firestore_extractor import FirestoreExtractor
from .extractors.json_extractor import JSONExtractor
from .loaders.base import BaseLoader
from .loaders.hygraph_loader import HygraphLoader
from .models.migration import MigrationConfig, MigrationSummary
from .models.record import ResultStatus
from .orchestrator import MigrationOrchestrator
from .services.checkpoint import CheckpointStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CRASHED = 1
EXIT_NOT_STARTED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Migrate school users from Firestore to Hygraph"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Run migration
    run_parser = subparsers.add_parser("run", help="Run the migration")
    run_parser.add_argument("--config", help="Path to a JSON config file")
    run_parser.add_argument("--collection", help="Source collection (default: students)")
    run_parser.add_argument("--concurrency", type=int, help="Concurrent requests, clamped to 1..5 (default: 3)")
    run_parser.add_argument("--delay", type=float, dest="delay_seconds", help="Pause after each record in seconds (default: 0.2)")
    run_parser.add_argument("--dry-run", action="store_true", help="Map and record without creating anything")
    run_parser.add_argument("--source-file", help="Read a JSON export instead of Firestore")
    run_parser.add_argument("--output", dest="output_path", help="Checkpoint file (default: migration-results.json)")

    # Preview mapping
    preview_parser = subparsers.add_parser("preview", help="Show mapped payloads for a JSON export")
    preview_parser.add_argument("--input", required=True, help="Path to a JSON export")
    preview_parser.add_argument("--collection", default="students", help="Collection inside the export")

    # Checkpoint status
    status_parser = subparsers.add_parser("status", help="Summarize a checkpoint file")
    status_parser.add_argument("--output", dest="output_path", default="migration-results.json", help="Checkpoint file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    load_dotenv()

    if args.command == "run":
        return run_migration(args)
    elif args.command == "preview":
        return run_preview(args)
    elif args.command == "status":
        return run_status(args)

    parser.print_help()
    return EXIT_OK


def build_config(args: argparse.Namespace) -> MigrationConfig:
    """Resolve configuration: flags > config file > environment > defaults."""
    config = MigrationConfig.from_env()

    if args.config:
        try:
            with open(args.config) as f:
                config = MigrationConfig.from_dict(json.load(f), base=config)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot read config file {args.config}: {e}") from e

    overrides: Dict[str, Any] = {
        key: getattr(args, key)
        for key in ("collection", "concurrency", "delay_seconds", "source_file", "output_path")
        if getattr(args, key) is not None
    }
    if args.dry_run:
        overrides["dry_run"] = True

    return MigrationConfig.from_dict(overrides, base=config)


def create_extractor(config: MigrationConfig) -> BaseExtractor:
    """Create the source extractor for the configuration."""
    if config.source_file:
        return JSONExtractor(config.source_file, collection=config.collection)
    return FirestoreExtractor(config.collection, project=config.firebase_project)


def create_loader(config: MigrationConfig) -> Optional[BaseLoader]:
    """Create the Hygraph loader, or None when it is not configured."""
    if not config.hygraph_endpoint or not config.hygraph_token:
        return None
    return HygraphLoader(
        endpoint=config.hygraph_endpoint,
        token=config.hygraph_token,
        timeout=config.request_timeout,
        max_retries=config.max_retries,
    )


def run_migration(args: argparse.Namespace) -> int:
    """Run the migration; returns the process exit code."""
    try:
        config = build_config(args)

        problems = config.validate()
        if problems:
            raise ConfigurationError("; ".join(problems))

        logger.info(f"Migration starting with config: {config.to_dict()}")

        orchestrator = MigrationOrchestrator(
            extractor=create_extractor(config),
            loader=create_loader(config),
            config=config,
        )
        summary = orchestrator.run_migration()

    except ConfigurationError as e:
        logger.error(f"Migration could not start: {e}")
        return EXIT_NOT_STARTED

    except Exception:
        logger.exception("Migration crashed")
        return EXIT_CRASHED

    print_summary(summary)
    return EXIT_OK


def print_summary(summary: MigrationSummary) -> None:
    print("\n" + "=" * 60)
    print("MIGRATION DRY RUN COMPLETE" if summary.dry_run else "MIGRATION COMPLETE")
    print("=" * 60)
    print(f"Total: {summary.total}")
    print(f"Processed: {summary.processed}")
    print(f"Created: {summary.created}")
    print(f"Failed: {summary.failed}")
    print(f"Skipped: {summary.skipped} ({summary.already_migrated} already migrated)")
    print(f"Results: {summary.output}")
    if summary.duration_seconds:
        print(f"Duration: {summary.duration_seconds:.2f} seconds")


def run_preview(args: argparse.Namespace) -> int:
    """Print the payloads a JSON export would be migrated as."""
    extractor = JSONExtractor(args.input, collection=args.collection)
    try:
        result = extractor.extract()
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_NOT_STARTED

    orchestrator = MigrationOrchestrator(
        extractor=extractor,
        loader=None,
        config=MigrationConfig(collection=args.collection, dry_run=True),
    )
    for output in orchestrator.preview(result.records):
        print(json.dumps(output, indent=2))
        print("-" * 40)

    return EXIT_OK


def run_status(args: argparse.Namespace) -> int:
    """Summarize the outcomes recorded in a checkpoint file."""
    store = CheckpointStore(args.output_path)
    if not store.path.exists():
        print(f"No checkpoint at {store.path}")
        return EXIT_OK

    results = store.load(set_aside=False)
    counts = Counter(r.status for r in results)

    print(f"\n=== {store.path} ===")
    print(f"Entries: {len(results)}")
    for status in ResultStatus:
        print(f"  {status.value}: {counts.get(status, 0)}")
    print(f"Migrated uids: {len(store.seen_success_keys(results))}")

    failures = [r for r in results if r.status == ResultStatus.FAILURE]
    if failures:
        print("\nFailures:")
        for r in failures:
            print(f"  [{r.index}] {r.uid or '<no uid>'}: {r.error}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
