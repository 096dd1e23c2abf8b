"""Data models for the migration job."""

from .schema import (
    EnumField,
    ROLE,
    DELIVERY_METHOD,
    STUDENT_GROUP,
    PROGRAM_TYPE,
)
from .migration import (
    MigrationConfig,
    MigrationSummary,
)
from .record import (
    ResultStatus,
    SourceRecord,
    AppUserPayload,
    MigrationResult,
)
from .hygraph import (
    AppUser,
    GraphQLErrorDetail,
    GraphQLResponse,
)

__all__ = [
    "EnumField",
    "ROLE",
    "DELIVERY_METHOD",
    "STUDENT_GROUP",
    "PROGRAM_TYPE",
    "MigrationConfig",
    "MigrationSummary",
    "ResultStatus",
    "SourceRecord",
    "AppUserPayload",
    "MigrationResult",
    "AppUser",
    "GraphQLErrorDetail",
    "GraphQLResponse",
]
