"""
Category custom fields.

Values live in a side table keyed by category id. A write replaces the
whole mapping of the category in one transaction.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional
from uuid import UUID

from domain.catalog.entities import CustomFieldValue
from domain.catalog.repositories import CategoryRepository
from domain.shared.exceptions import EntityNotFoundException, ValidationException

logger = logging.getLogger(__name__)


def to_custom_field_values(fields: Optional[Mapping]) -> List[CustomFieldValue]:
    """
    Validate a name -> value mapping. None values are dropped; names that
    collide after trimming keep the last value.
    """
    if fields is None:
        return []
    if not isinstance(fields, Mapping):
        raise ValidationException("Custom fields must be an object", "custom_fields", fields)
    values: Dict[str, CustomFieldValue] = {}
    for field_name, value in fields.items():
        if value is None:
            continue
        field_value = CustomFieldValue.from_python(field_name, value)
        values[field_value.field_name] = field_value
    return list(values.values())


def to_mapping(values: List[CustomFieldValue]) -> Dict[str, Any]:
    return {value.field_name: value.to_python() for value in values}


class CustomFieldService:
    """Read and replace the custom fields of a category."""

    def __init__(self, repository: CategoryRepository):
        self._repository = repository

    def get(self, category_id: UUID) -> Dict[str, Any]:
        if self._repository.get_by_id(category_id) is None:
            raise EntityNotFoundException("Category", category_id)
        return to_mapping(self._repository.get_custom_fields(category_id))

    def replace(
        self,
        category_id: UUID,
        fields: Optional[Mapping],
        updated_by: Optional[UUID] = None
    ) -> Dict[str, Any]:
        values = to_custom_field_values(fields)
        with self._repository.atomic():
            if self._repository.get_by_id(category_id, for_update=True) is None:
                raise EntityNotFoundException("Category", category_id)
            self._repository.replace_custom_fields(category_id, values, updated_by)
            self._repository.touch(category_id, updated_by)

        logger.info("Replaced %d custom fields of category %s", len(values), category_id)
        return to_mapping(values)
