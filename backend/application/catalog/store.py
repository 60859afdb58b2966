"""
Create, update and delete of categories.

The path of a new category is derived from its parent's path and the
sanitized name. Renames go through the same subtree rewrite as moves.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional
from uuid import UUID

from domain.catalog.entities import Category
from domain.catalog.paths import MAX_PATH_LENGTH, build_path, path_depth, sanitize_label
from domain.catalog.repositories import CategoryRepository
from domain.shared.exceptions import (
    DuplicateNameException,
    EntityNotFoundException,
    HasChildrenException,
    InvalidParentException,
    ReferencedByPartsException,
    ValidationException,
)
from domain.shared.value_objects import DisplayName

from .custom_fields import to_custom_field_values, to_mapping
from .move import DEFAULT_MAX_DEPTH, MoveEngine

logger = logging.getLogger(__name__)


UPDATABLE_FIELDS = ('name', 'description', 'is_public')


def _label_for(name: str) -> str:
    label = sanitize_label(name)
    if not label:
        raise ValidationException("Name does not produce a valid path label", "name", name)
    return label


def _check_is_public(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationException("is_public must be a boolean", "is_public", value)
    return value


class CategoryStore:
    """Write side of the category tree."""

    def __init__(
        self,
        repository: CategoryRepository,
        move_engine: MoveEngine,
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        self._repository = repository
        self._move_engine = move_engine
        self.max_depth = max_depth

    def create(
        self,
        name: str,
        parent_id: Optional[UUID] = None,
        description: Optional[str] = None,
        is_public: bool = True,
        created_by: Optional[UUID] = None,
        custom_fields: Optional[Mapping] = None
    ) -> Category:
        display_name = DisplayName(name).value
        label = _label_for(display_name)
        is_public = _check_is_public(is_public)
        values = to_custom_field_values(custom_fields)

        with self._repository.atomic():
            parent = None
            if parent_id is not None:
                # Locked so that a concurrent move cannot leave the new row
                # behind on the old prefix
                parent = self._repository.lock_ancestry(parent_id)
                if parent is None:
                    raise InvalidParentException(parent_id)

            path = build_path(parent.path if parent else None, label)
            if path_depth(path) > self.max_depth:
                raise ValidationException(
                    f"Category would be {path_depth(path)} levels deep; the limit is {self.max_depth}",
                    "parent_id",
                    parent_id,
                )
            if len(path) > MAX_PATH_LENGTH:
                raise ValidationException(
                    f"Category path would be {len(path)} characters long; the limit is {MAX_PATH_LENGTH}",
                    "name",
                    display_name,
                )
            if self._repository.label_exists(parent_id, label):
                raise DuplicateNameException(label, parent_id)

            category = self._repository.add(Category(
                name=display_name,
                label=label,
                path=path,
                parent_id=parent_id,
                description=description,
                is_public=is_public,
                created_by=created_by,
                updated_by=created_by,
            ))
            category.parent_name = parent.name if parent else None
            if values:
                self._repository.replace_custom_fields(category.id, values, created_by)
                category.custom_fields = to_mapping(values)

        logger.info("Created category %s at %s", category.id, category.path)
        return category

    def update(
        self,
        category_id: UUID,
        changes: Dict[str, Any],
        updated_by: Optional[UUID] = None
    ) -> Category:
        """
        Apply a partial update. A name change that alters the label also
        rewrites the paths of the whole subtree.
        """
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationException(
                f"Cannot update field(s): {', '.join(unknown)}", unknown[0], changes[unknown[0]]
            )

        with self._repository.atomic():
            category = self._repository.get_by_id(category_id, for_update=True)
            if category is None:
                raise EntityNotFoundException("Category", category_id)

            fields = []
            if 'description' in changes:
                category.description = changes['description']
                fields.append('description')
            if 'is_public' in changes:
                category.is_public = _check_is_public(changes['is_public'])
                fields.append('is_public')

            label = category.label
            if changes.get('name') is not None:
                category.name = DisplayName(changes['name']).value
                label = _label_for(category.name)
                fields.append('name')

            old_path = category.path
            if label != category.label:
                parent = None
                if category.parent_id is not None:
                    parent = self._repository.lock_ancestry(category.parent_id)
                    if parent is None:
                        raise InvalidParentException(category.parent_id)
                category = self._move_engine.relocate(category, parent, label, updated_by, fields)
            else:
                category.updated_by = updated_by
                category = self._repository.save(category, fields + ['updated_by'])

        if category.path != old_path:
            logger.info("Renamed category %s: %s -> %s", category_id, old_path, category.path)
        else:
            logger.info("Updated category %s (%s)", category_id, ', '.join(fields) or 'no fields')
        return category

    def delete(self, category_id: UUID, deleted_by: Optional[UUID] = None) -> None:
        """Soft-delete a leaf category that no part version references."""
        with self._repository.atomic():
            category = self._repository.get_by_id(category_id, for_update=True)
            if category is None:
                raise EntityNotFoundException("Category", category_id)

            child_count = self._repository.count_children(category_id)
            if child_count:
                raise HasChildrenException(category_id, child_count)

            parts_count = self._repository.count_part_references(category_id)
            if parts_count:
                raise ReferencedByPartsException(category_id, parts_count)

            self._repository.soft_delete(category_id, deleted_by)

        logger.info("Deleted category %s at %s", category_id, category.path)
