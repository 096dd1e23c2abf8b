"""Field mapping from Firestore user documents to Hygraph AppUser input."""

import logging
from typing import Any, Optional, Tuple

from ..errors import MissingKeyError
from ..models.record import SourceRecord, AppUserPayload
from ..models.schema import (
    EnumField,
    ROLE,
    DELIVERY_METHOD,
    STUDENT_GROUP,
    PROGRAM_TYPE,
)

logger = logging.getLogger(__name__)


def normalize_enum(value: Any, enum_field: EnumField) -> Tuple[str, Optional[str]]:
    """
    Normalize a raw value against an enum's canonical members.

    Args:
        value: Raw source value
        enum_field: Enum definition

    Returns:
        (member, custom) where ``custom`` is the trimmed original value when
        it did not match a canonical member, and None otherwise
    """
    if not isinstance(value, str):
        return enum_field.fallback, None

    member = enum_field.match(value)
    if member is not None:
        return member, None

    return enum_field.fallback, value.strip()


class FieldMapper:
    """
    Maps a source user document to an ``AppUserPayload``.

    Mapping is pure and deterministic: no I/O, no retries. The only failure
    is a record without a unique key.
    """

    OPTIONAL_ENUMS = (
        (DELIVERY_METHOD, "delivery_method"),
        (STUDENT_GROUP, "student_group"),
        (PROGRAM_TYPE, "program_type"),
    )

    def map(self, record: SourceRecord) -> AppUserPayload:
        """Map one source record, raising MissingKeyError if it has no uid."""
        uid = record.unique_key
        if not uid:
            raise MissingKeyError("Missing uid/id in Firestore user")

        raw_role = record.data.get("role")
        role, role_custom = normalize_enum("student" if raw_role is None else raw_role, ROLE)

        is_active = record.get_bool("isActive")
        password_changed = record.get_bool("passwordChanged")

        payload = AppUserPayload(
            uid=uid,
            email=record.get_str("email") or "",
            display_name=record.get_str("displayName") or "",
            role=role,
            role_custom=role_custom,
            is_active=True if is_active is None else is_active,
            password_changed=False if password_changed is None else password_changed,
        )

        for enum_field, attr in self.OPTIONAL_ENUMS:
            raw = record.data.get(enum_field.name)
            if raw is None or raw in ("", 0):
                continue
            member, custom = normalize_enum(raw, enum_field)
            setattr(payload, attr, member)
            setattr(payload, f"{attr}_custom", custom)
            if custom is not None:
                logger.debug(f"{uid}: unmapped {enum_field.name} {custom!r} -> {member}")

        return payload
