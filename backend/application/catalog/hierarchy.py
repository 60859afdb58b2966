"""
Read side of the category tree.

Every query is answered from the materialized paths; "not found" yields an
empty result instead of an error wherever a list is expected.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from domain.catalog.entities import Category, CategoryNode
from domain.catalog.paths import ancestor_paths
from domain.catalog.repositories import CategoryRepository
from domain.shared.exceptions import ValidationException


DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 100


def _clean_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {key: value for key, value in (filters or {}).items() if value is not None and value != ''}


class HierarchyIndex:
    """Read-only queries over the category tree."""

    def __init__(
        self,
        repository: CategoryRepository,
        default_limit: int = DEFAULT_SEARCH_LIMIT,
        max_limit: int = MAX_SEARCH_LIMIT
    ):
        self._repository = repository
        self.default_limit = default_limit
        self.max_limit = max_limit

    def get_by_id(self, category_id: UUID) -> Optional[Category]:
        return self._repository.get_by_id(category_id)

    def list_children(self, parent_id: Optional[UUID]) -> List[Category]:
        """One level below `parent_id`; roots when it is None."""
        return self._repository.list_children(parent_id)

    def list_descendants(self, category_id: UUID) -> List[Category]:
        """All nodes strictly below the category, in pre-order."""
        category = self._repository.get_by_id(category_id)
        if category is None:
            return []
        return self._repository.list_descendants(category.path)

    def list_ancestors(self, category_id: UUID) -> List[Category]:
        """Ancestors root-first, with the category itself as the last element."""
        category = self._repository.get_by_id(category_id)
        if category is None:
            return []
        return self._repository.get_by_paths(ancestor_paths(category.path))

    def list_categories(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        return self._repository.list_all(_clean_filters(filters))

    def search(
        self,
        query: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Category]:
        """Case-insensitive substring match on name, ordered by name."""
        limit = self.default_limit if limit is None else limit
        if limit < 1 or limit > self.max_limit:
            raise ValidationException(
                f"limit must be between 1 and {self.max_limit}", "limit", limit
            )
        if offset < 0:
            raise ValidationException("offset must not be negative", "offset", offset)
        return self._repository.search(
            (query or '').strip(),
            _clean_filters(filters),
            limit=limit,
            offset=offset,
        )

    def build_tree(self) -> List[CategoryNode]:
        """Nested roots built from a single path-ordered read."""
        nodes: Dict[UUID, CategoryNode] = {}
        roots: List[CategoryNode] = []
        # Parents sort before their children, so each parent is already mapped
        for category in self._repository.list_all():
            node = CategoryNode(category=category)
            nodes[category.id] = node
            parent = nodes.get(category.parent_id) if category.parent_id else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        return roots

    def get_counts(self, category_id: UUID) -> Dict[str, int]:
        return {
            'child_count': self._repository.count_children(category_id),
            'parts_count': self._repository.count_part_references(category_id),
        }
