#!/usr/bin/env python3
"""
Example: Firestore students to Hygraph AppUsers

Usage:
    # Dry run over built-in sample documents (no credentials needed)
    python run_migration.py --demo

    # Dry run against the real Firestore collection
    python run_migration.py --dry-run

    # Full migration (needs HYGRAPH_ENDPOINT and HYGRAPH_TOKEN)
    python run_migration.py
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from dotenv import load_dotenv

from schoolsync.cli import create_extractor, create_loader
from schoolsync.extractors.base import BaseExtractor, ExtractionResult
from schoolsync.models.migration import MigrationConfig
from schoolsync.orchestrator import MigrationOrchestrator
from schoolsync.services.mapper import FieldMapper

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('migration.log')
    ]
)
logger = logging.getLogger(__name__)


SAMPLE_STUDENTS: List[Dict[str, Any]] = [
    {
        "id": "k2Jd9aQ",
        "uid": "k2Jd9aQ",
        "email": "maya@school.example",
        "displayName": "Maya Cohen",
        "role": "Student",
        "isActive": True,
        "deliveryMethod": "online",
        "studentGroup": "a",
        "programType": "Regular",
    },
    {
        "id": "P0x7LmT",
        "email": "daniel@school.example",
        "displayName": "Daniel Levi",
        "role": "tutor",
        "passwordChanged": True,
        "deliveryMethod": "evenings only",
        "programType": "summer",
    },
    {
        "email": "orphan@school.example",
        "displayName": "Imported without uid",
    },
]


class SampleExtractor(BaseExtractor):
    """Serves SAMPLE_STUDENTS as the source collection."""

    def __init__(self):
        super().__init__("students", service="sample")

    def extract(self) -> ExtractionResult:
        records = [self.create_record(doc.get("id"), dict(doc)) for doc in SAMPLE_STUDENTS]
        return self.get_extraction_result(records)


def demo_with_sample_data():
    """Preview the mapping and dry-run the sample documents."""
    logger.info("Running demo with sample data...")

    mapper = FieldMapper()
    logger.info("\n=== Mapping Preview ===")
    for record in SampleExtractor().extract().records:
        try:
            logger.info(json.dumps(mapper.map(record).to_input(), indent=2))
        except Exception as e:
            logger.warning(f"Could not map {record.id or '<no id>'}: {e}")

    config = MigrationConfig(
        dry_run=True,
        delay_seconds=0,
        output_path=str(Path(__file__).parent / "demo-results.json"),
    )
    orchestrator = MigrationOrchestrator(SampleExtractor(), loader=None, config=config)
    summary = orchestrator.run_migration()

    logger.info(f"\nDemo complete! {summary.processed} records written to {summary.output}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Firestore students to Hygraph AppUsers"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Record what would be created without creating anything"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run demo with sample data (no credentials needed)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.demo:
        demo_with_sample_data()
        return

    load_dotenv()
    config = MigrationConfig.from_env()
    if args.dry_run:
        config.dry_run = True

    problems = config.validate()
    if problems:
        for problem in problems:
            logger.error(problem)
        logger.info("Set these or use --dry-run for simulation")
        sys.exit(1)

    orchestrator = MigrationOrchestrator(
        extractor=create_extractor(config),
        loader=create_loader(config),
        config=config,
    )
    summary = orchestrator.run_migration()

    logger.info(json.dumps(summary.to_dict(), indent=2))
    if summary.failed:
        logger.warning(f"{summary.failed} records failed; re-run to retry them")


if __name__ == "__main__":
    main()
