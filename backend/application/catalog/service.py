"""
Category Service - the application facade over the category engine.

The presentation layer and background tasks talk to this class only.
Identifiers arrive as UUIDs or strings and are validated here before they
reach the components.
"""

from typing import Any, Dict, List, Optional

from domain.catalog.entities import Category, CategoryNode
from domain.catalog.repositories import CategoryRepository, ClosureOracle
from domain.shared.exceptions import EntityNotFoundException
from domain.shared.value_objects import parse_optional_uuid, parse_uuid

from .closure import PathPrefixClosureOracle
from .custom_fields import CustomFieldService
from .hierarchy import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT, HierarchyIndex
from .integrity import IntegrityReport, PathIntegrityChecker
from .move import DEFAULT_MAX_DEPTH, MoveEngine
from .store import CategoryStore


class CategoryService:

    def __init__(
        self,
        store: CategoryStore,
        move_engine: MoveEngine,
        oracle: ClosureOracle,
        index: HierarchyIndex,
        custom_fields: CustomFieldService,
        integrity: PathIntegrityChecker
    ):
        self.store = store
        self.move_engine = move_engine
        self.oracle = oracle
        self.index = index
        self.custom_fields = custom_fields
        self.integrity = integrity

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def create_category(
        self,
        name: str,
        created_by: Any = None,
        parent_id: Any = None,
        description: Optional[str] = None,
        is_public: bool = True,
        custom_fields: Optional[Dict[str, Any]] = None
    ) -> Category:
        return self.store.create(
            name=name,
            parent_id=parent_id if parent_id is None else parse_uuid(parent_id, "parent_id"),
            description=description,
            is_public=is_public,
            created_by=parse_optional_uuid(created_by, "created_by"),
            custom_fields=custom_fields,
        )

    def update_category(self, category_id: Any, changes: Dict[str, Any], updated_by: Any = None) -> Category:
        return self.store.update(
            parse_uuid(category_id),
            changes,
            updated_by=parse_optional_uuid(updated_by, "updated_by"),
        )

    def delete_category(self, category_id: Any, deleted_by: Any = None) -> None:
        self.store.delete(parse_uuid(category_id), parse_optional_uuid(deleted_by, "deleted_by"))

    def move_category(self, category_id: Any, new_parent_id: Any, moved_by: Any = None) -> Category:
        return self.move_engine.move(
            parse_uuid(category_id),
            new_parent_id if new_parent_id is None else parse_uuid(new_parent_id, "parent_id"),
            moved_by=parse_optional_uuid(moved_by, "moved_by"),
        )

    def update_category_custom_fields(
        self,
        category_id: Any,
        fields: Optional[Dict[str, Any]],
        updated_by: Any = None
    ) -> Dict[str, Any]:
        return self.custom_fields.replace(
            parse_uuid(category_id),
            fields,
            updated_by=parse_optional_uuid(updated_by, "updated_by"),
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_category(self, category_id: Any, with_details: bool = False) -> Category:
        """
        Fetch one category. With `with_details`, custom fields are loaded
        onto the record.
        """
        category_id = parse_uuid(category_id)
        category = self.index.get_by_id(category_id)
        if category is None:
            raise EntityNotFoundException("Category", category_id)
        if with_details:
            category.custom_fields = self.custom_fields.get(category_id)
        return category

    def get_category_counts(self, category_id: Any) -> Dict[str, int]:
        category = self.get_category(category_id)
        return self.index.get_counts(category.id)

    def list_categories(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        return self.index.list_categories(filters)

    def get_category_children(self, category_id: Any) -> List[Category]:
        return self.index.list_children(parse_uuid(category_id))

    def get_root_categories(self) -> List[Category]:
        return self.index.list_children(None)

    def get_category_descendants(self, category_id: Any) -> List[Category]:
        return self.index.list_descendants(parse_uuid(category_id))

    def get_category_breadcrumbs(self, category_id: Any) -> List[Category]:
        """Ancestors root-first, ending with the category itself."""
        category = self.get_category(category_id)
        return self.index.list_ancestors(category.id)

    def search_categories(
        self,
        query: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Category]:
        return self.index.search(query, filters, limit=limit, offset=offset)

    def get_category_custom_fields(self, category_id: Any) -> Dict[str, Any]:
        return self.custom_fields.get(parse_uuid(category_id))

    def get_category_tree(self) -> List[CategoryNode]:
        return self.index.build_tree()

    def is_descendant(self, ancestor_id: Any, candidate_id: Any) -> bool:
        return self.oracle.is_descendant(parse_uuid(ancestor_id), parse_uuid(candidate_id))

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def verify_paths(self, repair: bool = False) -> IntegrityReport:
        return self.integrity.check(repair=repair)


def build_category_service(
    repository: CategoryRepository,
    max_depth: int = DEFAULT_MAX_DEPTH,
    search_default_limit: int = DEFAULT_SEARCH_LIMIT,
    search_max_limit: int = MAX_SEARCH_LIMIT
) -> CategoryService:
    """Wire the category components around one repository."""
    oracle = PathPrefixClosureOracle(repository)
    move_engine = MoveEngine(repository, oracle, max_depth=max_depth)
    return CategoryService(
        store=CategoryStore(repository, move_engine, max_depth=max_depth),
        move_engine=move_engine,
        oracle=oracle,
        index=HierarchyIndex(
            repository,
            default_limit=search_default_limit,
            max_limit=search_max_limit,
        ),
        custom_fields=CustomFieldService(repository),
        integrity=PathIntegrityChecker(repository),
    )
