"""
Shared Value Objects used across multiple domains.

Value Objects are immutable objects that describe characteristics of a thing.
Two value objects are equal if all their properties are equal.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
from uuid import UUID

from .exceptions import ValidationException


MAX_NAME_LENGTH = 255


def parse_uuid(value: Any, field: str = "id") -> UUID:
    """Coerce a caller-supplied identifier into a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationException(f"'{value}' is not a valid identifier", field, value)


def parse_optional_uuid(value: Any, field: str = "id") -> Optional[UUID]:
    if value is None or value == "":
        return None
    return parse_uuid(value, field)


# =============================================================================
# VALUE OBJECTS
# =============================================================================

@dataclass(frozen=True)
class DisplayName:
    """
    Value object representing a human-entered display name.
    Surrounding whitespace is dropped; blank names are rejected.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValidationException("Name must be a string", "name", self.value)
        stripped = self.value.strip()
        if not stripped:
            raise ValidationException("Name is required", "name", self.value)
        if len(stripped) > MAX_NAME_LENGTH:
            raise ValidationException(
                f"Name is longer than {MAX_NAME_LENGTH} characters", "name", self.value
            )
        object.__setattr__(self, "value", stripped)

    def __str__(self) -> str:
        return self.value
