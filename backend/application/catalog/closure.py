"""
Ancestry oracle over materialized paths.

A category B lies below A exactly when B.path starts with A.path followed
by the separator, so no closure table is maintained.
"""

from uuid import UUID

from domain.catalog.paths import is_strict_prefix
from domain.catalog.repositories import CategoryRepository, ClosureOracle


class PathPrefixClosureOracle(ClosureOracle):
    """ClosureOracle answering from the stored paths."""

    def __init__(self, repository: CategoryRepository):
        self._repository = repository

    def is_descendant(self, ancestor_id: UUID, candidate_id: UUID) -> bool:
        if ancestor_id == candidate_id:
            return False
        ancestor = self._repository.get_by_id(ancestor_id)
        candidate = self._repository.get_by_id(candidate_id)
        if ancestor is None or candidate is None:
            return False
        return is_strict_prefix(ancestor.path, candidate.path)
