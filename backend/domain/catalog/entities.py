"""
Catalog Domain - Entities.

Category is the one record type that crosses the store boundary: the
repository normalizes every ORM row into it right after the read.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from domain.shared.base_entity import AuditableEntity
from domain.shared.exceptions import ValidationException

from .paths import is_strict_prefix, path_depth, split_path


@dataclass(eq=False)
class Category(AuditableEntity):
    """
    Node of the category taxonomy.

    `path` is derived from the parent's path and the sanitized `label`;
    callers never set it directly.
    """

    name: str = ""
    label: str = ""
    path: str = ""
    parent_id: Optional[UUID] = None
    description: Optional[str] = None
    is_public: bool = True
    custom_fields: Dict[str, Any] = field(default_factory=dict)
    # Filled in by reads; never written back
    parent_name: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def depth(self) -> int:
        return path_depth(self.path)

    @property
    def segments(self) -> List[str]:
        return split_path(self.path)

    def is_ancestor_of(self, other: Category) -> bool:
        """Strict ancestry: a category is not its own ancestor."""
        return is_strict_prefix(self.path, other.path)


@dataclass
class CategoryNode:
    """Category with its nested children, for tree reads."""

    category: Category
    children: List[CategoryNode] = field(default_factory=list)

    def walk(self):
        """Pre-order traversal."""
        yield self
        for child in self.children:
            yield from child.walk()


class CustomFieldDataType(str, Enum):
    """Stored kind of a custom field value."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


MAX_FIELD_NAME_LENGTH = 100


@dataclass(frozen=True)
class CustomFieldValue:
    """
    One entry of a category's custom-field mapping, in stored form.

    Dates are stored as ISO strings; everything else is kept as the JSON
    scalar it arrived as.
    """

    field_name: str
    value: Any
    data_type: CustomFieldDataType

    @classmethod
    def from_python(cls, field_name: Any, value: Any) -> CustomFieldValue:
        if not isinstance(field_name, str) or not field_name.strip():
            raise ValidationException("Custom field name must be a non-empty string", "custom_fields", field_name)
        field_name = field_name.strip()
        if len(field_name) > MAX_FIELD_NAME_LENGTH:
            raise ValidationException(
                f"Custom field name is longer than {MAX_FIELD_NAME_LENGTH} characters",
                "custom_fields",
                field_name,
            )

        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return cls(field_name, value, CustomFieldDataType.BOOLEAN)
        if isinstance(value, (int, float)):
            return cls(field_name, value, CustomFieldDataType.NUMBER)
        if isinstance(value, (datetime, date)):
            return cls(field_name, value.isoformat(), CustomFieldDataType.DATE)
        if isinstance(value, str):
            return cls(field_name, value, CustomFieldDataType.TEXT)
        raise ValidationException(
            f"Unsupported value type '{type(value).__name__}' for custom field '{field_name}'",
            "custom_fields",
            value,
        )

    def to_python(self) -> Any:
        """Decode the stored value according to its data type."""
        value = self.value
        if self.data_type == CustomFieldDataType.NUMBER and isinstance(value, str):
            try:
                return float(value) if "." in value else int(value)
            except ValueError:
                return value
        if self.data_type == CustomFieldDataType.BOOLEAN and isinstance(value, str):
            return value.strip().lower() == "true"
        if self.data_type == CustomFieldDataType.DATE and value is not None:
            return str(value)
        return value
