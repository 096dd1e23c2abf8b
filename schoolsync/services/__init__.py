"""Service layer for the migration job."""

from .mapper import FieldMapper, normalize_enum
from .checkpoint import CheckpointStore
from .target import ExistenceChecker, RecordCreator
from .throttle import ConcurrencyController, clamp_width

__all__ = [
    "FieldMapper",
    "normalize_enum",
    "CheckpointStore",
    "ExistenceChecker",
    "RecordCreator",
    "ConcurrencyController",
    "clamp_width",
]
