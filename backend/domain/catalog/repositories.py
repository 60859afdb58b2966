"""
Catalog Domain - Repository Interfaces (Ports).

These are abstract interfaces that define how the category engine interacts
with persistence. The Django implementation lives in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any, Dict, List, Optional
from uuid import UUID

from .entities import Category, CustomFieldValue


class CategoryRepository(ABC):
    """
    Transactional store for the category tree.

    Reads never return soft-deleted rows. Every write is expected to run
    inside `atomic()`; the store translates its own failures into
    StoreException and uniqueness violations into DuplicateNameException.
    """

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Context manager enclosing one all-or-nothing unit of work."""
        pass

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_by_id(self, category_id: UUID, for_update: bool = False) -> Optional[Category]:
        """Get a live category; `for_update` locks the row until commit."""
        pass

    @abstractmethod
    def lock_ancestry(self, category_id: UUID) -> Optional[Category]:
        """
        Lock a live category and all of its ancestors, root first, until
        commit. Returns the category as read once the locks are held, so its
        path can no longer be changed by a concurrent move.
        """
        pass

    @abstractmethod
    def get_by_paths(self, paths: List[str]) -> List[Category]:
        """Live categories whose path is one of `paths`."""
        pass

    @abstractmethod
    def list_children(self, parent_id: Optional[UUID]) -> List[Category]:
        """Direct live children (roots when parent_id is None)."""
        pass

    @abstractmethod
    def list_descendants(self, path: str) -> List[Category]:
        """Live categories strictly below `path`."""
        pass

    @abstractmethod
    def list_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        """All live categories, optionally filtered."""
        pass

    @abstractmethod
    def search(
        self,
        query: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Category]:
        """Case-insensitive name search ordered by name."""
        pass

    @abstractmethod
    def label_exists(
        self,
        parent_id: Optional[UUID],
        label: str,
        exclude_id: Optional[UUID] = None
    ) -> bool:
        """Whether a live sibling under `parent_id` already uses `label`."""
        pass

    @abstractmethod
    def max_descendant_depth(self, path: str) -> int:
        """Deepest segment count strictly below `path`, 0 for leaves."""
        pass

    @abstractmethod
    def max_descendant_path_length(self, path: str) -> int:
        """Length of the longest path strictly below `path`, 0 for leaves."""
        pass

    @abstractmethod
    def count_children(self, category_id: UUID) -> int:
        pass

    @abstractmethod
    def count_part_references(self, category_id: UUID) -> int:
        pass

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @abstractmethod
    def add(self, category: Category) -> Category:
        """Insert a new category and return it as stored."""
        pass

    @abstractmethod
    def save(self, category: Category, fields: List[str]) -> Category:
        """Persist the listed attributes of an existing category."""
        pass

    @abstractmethod
    def rewrite_subtree(self, old_path: str, new_path: str) -> int:
        """
        Replace the `old_path` prefix of every descendant path with
        `new_path` in one statement. Returns the number of rows rewritten.
        """
        pass

    @abstractmethod
    def soft_delete(self, category_id: UUID, deleted_by: Optional[UUID]) -> None:
        pass

    # -------------------------------------------------------------------------
    # Custom fields
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_custom_fields(self, category_id: UUID) -> List[CustomFieldValue]:
        pass

    @abstractmethod
    def replace_custom_fields(
        self,
        category_id: UUID,
        values: List[CustomFieldValue],
        user_id: Optional[UUID]
    ) -> None:
        """Drop every stored field of the category and insert `values`."""
        pass

    @abstractmethod
    def touch(self, category_id: UUID, user_id: Optional[UUID]) -> None:
        """Stamp updated_by / updated_at without other changes."""
        pass


class ClosureOracle(ABC):
    """Answers ancestry questions for the move engine."""

    @abstractmethod
    def is_descendant(self, ancestor_id: UUID, candidate_id: UUID) -> bool:
        """True iff `candidate_id` lies strictly below `ancestor_id`."""
        pass
