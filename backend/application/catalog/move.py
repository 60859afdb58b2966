"""
Reparenting of categories.

A move rewrites the node's parent and path and substitutes the old path
prefix of every descendant with the new one. Both writes happen in one
transaction, so no reader ever sees a half-moved subtree.
"""

import logging
from typing import List, Optional
from uuid import UUID

from domain.catalog.entities import Category
from domain.catalog.paths import MAX_PATH_LENGTH, build_path, path_depth, sanitize_label
from domain.catalog.repositories import CategoryRepository, ClosureOracle
from domain.shared.exceptions import (
    CircularReferenceException,
    DuplicateNameException,
    EntityNotFoundException,
    InvalidParentException,
    ValidationException,
)

logger = logging.getLogger(__name__)


DEFAULT_MAX_DEPTH = 32


class MoveEngine:
    """Validates and executes category moves."""

    def __init__(
        self,
        repository: CategoryRepository,
        oracle: ClosureOracle,
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        self._repository = repository
        self._oracle = oracle
        self.max_depth = max_depth

    def move(
        self,
        category_id: UUID,
        new_parent_id: Optional[UUID],
        moved_by: Optional[UUID] = None
    ) -> Category:
        """
        Move a category (with its subtree) under `new_parent_id`, or to the
        root level when it is None.

        Raises:
            EntityNotFoundException: the category does not exist
            InvalidParentException: the new parent does not exist
            CircularReferenceException: the new parent is the category itself
                or one of its descendants
            DuplicateNameException: the new parent already has a child with
                the same label
        """
        with self._repository.atomic():
            category = self._repository.get_by_id(category_id, for_update=True)
            if category is None:
                raise EntityNotFoundException("Category", category_id)

            new_parent = None
            if new_parent_id is not None:
                # Holding the new parent and its ancestors keeps the cycle
                # check below valid until commit
                new_parent = self._repository.lock_ancestry(new_parent_id)
                if new_parent is None:
                    raise InvalidParentException(new_parent_id)
                if new_parent_id == category_id or self._oracle.is_descendant(category_id, new_parent_id):
                    logger.warning(
                        "Rejected move of category %s under its descendant %s",
                        category_id, new_parent_id,
                    )
                    raise CircularReferenceException([category_id, new_parent_id])

            old_path = category.path
            moved = self.relocate(
                category,
                new_parent,
                sanitize_label(category.name),
                moved_by,
                fields=['parent_id'],
            )

        logger.info("Moved category %s: %s -> %s", category_id, old_path, moved.path)
        return moved

    def relocate(
        self,
        category: Category,
        parent: Optional[Category],
        label: str,
        user_id: Optional[UUID],
        fields: Optional[List[str]] = None
    ) -> Category:
        """
        Place `category` under `parent` with `label` and rewrite its subtree.

        Shared by move and rename. Must be called inside the caller's
        transaction with the category row and the ancestry of `parent`
        locked. `fields` lists further attributes already changed on
        `category` that should be saved too.
        """
        parent_id = parent.id if parent else None
        if self._repository.label_exists(parent_id, label, exclude_id=category.id):
            raise DuplicateNameException(label, parent_id)

        old_path = category.path
        new_path = build_path(parent.path if parent else None, label)
        self._check_depth(old_path, new_path)
        self._check_path_length(old_path, new_path)

        category.parent_id = parent_id
        category.label = label
        category.path = new_path
        category.updated_by = user_id

        saved = self._repository.save(
            category,
            list(fields or []) + ['label', 'path', 'updated_by'],
        )
        self._repository.rewrite_subtree(old_path, new_path)
        saved.parent_name = parent.name if parent else None
        return saved

    def _check_depth(self, old_path: str, new_path: str) -> None:
        deepest = self._repository.max_descendant_depth(old_path)
        below = deepest - path_depth(old_path) if deepest else 0
        resulting = path_depth(new_path) + below
        if resulting > self.max_depth:
            raise ValidationException(
                f"Category tree would be {resulting} levels deep; the limit is {self.max_depth}",
                "parent_id",
                resulting,
            )

    def _check_path_length(self, old_path: str, new_path: str) -> None:
        longest = self._repository.max_descendant_path_length(old_path)
        resulting = len(new_path) + (longest - len(old_path) if longest else 0)
        if resulting > MAX_PATH_LENGTH:
            raise ValidationException(
                f"Category path would be {resulting} characters long; the limit is {MAX_PATH_LENGTH}",
                "path",
                resulting,
            )
