"""Canonical enum definitions for the Hygraph AppUser model."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class EnumField:
    """An enum-valued target field with a fallback member.

    Values that do not match one of ``canonical`` are replaced by ``fallback``
    and the original (trimmed) value is kept in ``custom_field``.
    """
    name: str
    canonical: Tuple[str, ...]
    fallback: str
    custom_field: str

    def match(self, value: str) -> Optional[str]:
        """Return the canonical member equal to ``value`` ignoring case and padding."""
        wanted = value.strip().lower()
        for member in self.canonical:
            if member.lower() == wanted:
                return member
        return None


ROLE = EnumField(
    name="role",
    canonical=("student", "teacher", "admin", "super_admin"),
    fallback="student",
    custom_field="roleCustom",
)

DELIVERY_METHOD = EnumField(
    name="deliveryMethod",
    canonical=("Online", "InPerson", "Hybrid", "Other"),
    fallback="Other",
    custom_field="deliveryMethodCustom",
)

STUDENT_GROUP = EnumField(
    name="studentGroup",
    canonical=("A", "B", "C", "Other"),
    fallback="Other",
    custom_field="studentGroupCustom",
)

PROGRAM_TYPE = EnumField(
    name="programType",
    canonical=("Regular", "Intensive", "Summer", "Other"),
    fallback="Other",
    custom_field="programTypeCustom",
)
