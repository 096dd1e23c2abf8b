"""Record models for migration data."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum

from ..errors import CheckpointError


class ResultStatus(str, Enum):
    """Terminal status of a candidate in a migration run."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"
    DRY_RUN = "dryRun"


@dataclass(frozen=True)
class SourceRecord:
    """A document read from the source store.

    ``data`` is loosely typed; use the ``get_*`` accessors to read it.
    """
    id: Optional[str]
    data: Dict[str, Any]
    source_service: str = "firestore"
    source_entity: str = "students"

    def get_str(self, name: str) -> Optional[str]:
        """Return a string field, or None when it is absent or not text."""
        value = self.data.get(name)
        if isinstance(value, str):
            return value
        # bool is an int subclass
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    def get_bool(self, name: str) -> Optional[bool]:
        """Return a boolean field, or None when it is absent or not a bool."""
        value = self.data.get(name)
        if isinstance(value, bool):
            return value
        return None

    @property
    def unique_key(self) -> Optional[str]:
        """The record's uid: ``uid`` field, then ``id`` field, then document id."""
        for candidate in (self.get_str("uid"), self.get_str("id"), self.id):
            if candidate and candidate.strip():
                return candidate.strip()
        return None


@dataclass
class AppUserPayload:
    """Normalized Hygraph AppUser ready for creation.

    Optional fields left at ``None`` were never set by the mapper and are
    omitted from the create input so that Hygraph applies its own defaults.
    """
    uid: str
    email: str = ""
    display_name: str = ""
    role: str = "student"
    is_active: bool = True
    password_changed: bool = False
    role_custom: Optional[str] = None
    delivery_method: Optional[str] = None
    delivery_method_custom: Optional[str] = None
    student_group: Optional[str] = None
    student_group_custom: Optional[str] = None
    program_type: Optional[str] = None
    program_type_custom: Optional[str] = None

    def to_input(self) -> Dict[str, Any]:
        """Render the ``AppUserCreateInput`` GraphQL variables."""
        data = {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "role": self.role,
            "isActive": self.is_active,
            "passwordChanged": self.password_changed,
            "roleCustom": self.role_custom,
            "deliveryMethod": self.delivery_method,
            "deliveryMethodCustom": self.delivery_method_custom,
            "studentGroup": self.student_group,
            "studentGroupCustom": self.student_group_custom,
            "programType": self.program_type,
            "programTypeCustom": self.program_type_custom,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class MigrationResult:
    """Outcome of one candidate; one checkpoint entry."""
    index: int
    uid: str
    status: ResultStatus
    email: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the checkpoint entry representation."""
        entry: Dict[str, Any] = {"index": self.index, "uid": self.uid}
        if self.email is not None:
            entry["email"] = self.email
        entry["status"] = self.status.value
        if self.reason is not None:
            entry["reason"] = self.reason
        if self.error is not None:
            entry["error"] = self.error
        return entry

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationResult":
        """Create from a checkpoint entry."""
        if not isinstance(data, dict):
            raise CheckpointError(f"Checkpoint entry is not an object: {data!r}")

        index = data.get("index")
        uid = data.get("uid")
        if not isinstance(index, int) or isinstance(index, bool):
            raise CheckpointError(f"Checkpoint entry has no integer index: {data!r}")
        if not isinstance(uid, str):
            raise CheckpointError(f"Checkpoint entry has no uid: {data!r}")

        try:
            status = ResultStatus(data.get("status"))
        except ValueError:
            raise CheckpointError(f"Unknown checkpoint status: {data.get('status')!r}")

        return cls(
            index=index,
            uid=uid,
            status=status,
            email=data.get("email"),
            reason=data.get("reason"),
            error=data.get("error"),
        )
