"""
Django implementation of the CategoryRepository port.

This is the only module that sees Category ORM rows; each row is
normalized into the domain record by `_to_entity` right after the read.
"""

import functools
import logging
from operator import attrgetter
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F, Max, TextField, Value
from django.db.models.functions import Concat, Length, Substr
from django.utils import timezone

from domain.catalog.entities import Category, CustomFieldDataType, CustomFieldValue
from domain.catalog.paths import ancestor_paths, descendant_prefix, path_depth
from domain.catalog.repositories import CategoryRepository
from domain.shared.exceptions import (
    DuplicateNameException,
    StoreException,
    ValidationException,
)

from ..filters import CategoryFilterSet
from ..models import (
    Category as CategoryModel,
    CategoryCustomField,
    PartVersionCategory,
)

logger = logging.getLogger(__name__)


# Attempts at locking an ancestry chain that a concurrent move keeps relocating
LOCK_ATTEMPTS = 3


# entity attribute -> model field name
WRITABLE_FIELDS = {
    'name': 'name',
    'label': 'label',
    'path': 'path',
    'parent_id': 'parent',
    'description': 'description',
    'is_public': 'is_public',
    'updated_by': 'updated_by',
}


def _store_errors(operation: str):
    """Translate unexpected database failures into StoreException."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except DatabaseError as exc:
                logger.exception("Category store failure during %s", operation)
                raise StoreException(operation, str(exc)) from exc
        return wrapper

    return decorator


def _is_unique_violation(exc: IntegrityError) -> bool:
    cause = exc.__cause__
    if getattr(cause, 'pgcode', None) == '23505':
        return True
    return 'unique' in str(exc).lower()


def _to_entity(row: CategoryModel) -> Category:
    return Category(
        id=row.id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        version=row.version,
        created_by=row.created_by_id,
        updated_by=row.updated_by_id,
        deleted_at=row.deleted_at,
        deleted_by=row.deleted_by_id,
        name=row.name,
        label=row.label,
        path=row.path,
        parent_id=row.parent_id,
        description=row.description,
        is_public=row.is_public,
        parent_name=getattr(row, 'parent_name', None),
    )


def _with_parent_name(queryset):
    return queryset.annotate(parent_name=F('parent__name'))


def _by_path(rows) -> List[Category]:
    # Code-point order is pre-order for '.'-joined paths, independent of
    # the database collation.
    return sorted((_to_entity(row) for row in rows), key=attrgetter('path'))


class DjangoCategoryRepository(CategoryRepository):
    """Category store backed by the Django ORM."""

    def atomic(self):
        return transaction.atomic()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _filtered(self, queryset, filters: Optional[Dict[str, Any]]):
        if not filters:
            return queryset
        # The FilterSet parses query-string data
        data = {
            key: str(value).lower() if isinstance(value, bool) else str(value)
            for key, value in filters.items()
        }
        filterset = CategoryFilterSet(data=data, queryset=queryset)
        if not filterset.is_valid():
            field, errors = next(iter(filterset.errors.items()))
            raise ValidationException(
                f"Invalid filter '{field}': {' '.join(errors)}",
                field,
                filters.get(field),
            )
        return filterset.qs

    @_store_errors('get_by_id')
    def get_by_id(self, category_id: UUID, for_update: bool = False) -> Optional[Category]:
        if for_update:
            # FOR UPDATE cannot cover the outer join to the parent
            queryset = CategoryModel.objects.select_for_update()
        else:
            queryset = _with_parent_name(CategoryModel.objects.all())
        row = queryset.filter(pk=category_id).first()
        return _to_entity(row) if row else None

    @_store_errors('lock_ancestry')
    def lock_ancestry(self, category_id: UUID) -> Optional[Category]:
        row = CategoryModel.objects.filter(pk=category_id).first()
        for _ in range(LOCK_ATTEMPTS):
            if row is None:
                return None
            # Root first, the same order a moving ancestor takes its rows in
            list(
                CategoryModel.objects.select_for_update()
                .filter(path__in=ancestor_paths(row.path))
                .order_by('path')
                .values_list('pk', flat=True)
            )
            locked = CategoryModel.objects.filter(pk=category_id).first()
            if locked is None or locked.path == row.path:
                return _to_entity(locked) if locked else None
            # An ancestor moved between the read and the lock
            row = locked
        raise StoreException('lock_ancestry', f"ancestry of category {category_id} kept moving")

    @_store_errors('get_by_paths')
    def get_by_paths(self, paths: List[str]) -> List[Category]:
        if not paths:
            return []
        return _by_path(_with_parent_name(CategoryModel.objects.filter(path__in=paths)))

    @_store_errors('list_children')
    def list_children(self, parent_id: Optional[UUID]) -> List[Category]:
        if parent_id is None:
            queryset = CategoryModel.objects.filter(parent__isnull=True)
        else:
            queryset = CategoryModel.objects.filter(parent_id=parent_id)
        return _by_path(_with_parent_name(queryset))

    @_store_errors('list_descendants')
    def list_descendants(self, path: str) -> List[Category]:
        return _by_path(_with_parent_name(
            CategoryModel.objects.filter(path__startswith=descendant_prefix(path))
        ))

    @_store_errors('list_all')
    def list_all(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        return _by_path(self._filtered(_with_parent_name(CategoryModel.objects.all()), filters))

    @_store_errors('search')
    def search(
        self,
        query: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Category]:
        queryset = _with_parent_name(CategoryModel.objects.all())
        if query:
            queryset = queryset.filter(name__icontains=query)
        queryset = self._filtered(queryset, filters).order_by('name', 'path')
        return [_to_entity(row) for row in queryset[offset:offset + limit]]

    @_store_errors('label_exists')
    def label_exists(
        self,
        parent_id: Optional[UUID],
        label: str,
        exclude_id: Optional[UUID] = None
    ) -> bool:
        queryset = CategoryModel.objects.filter(label=label)
        if parent_id is None:
            queryset = queryset.filter(parent__isnull=True)
        else:
            queryset = queryset.filter(parent_id=parent_id)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()

    @_store_errors('max_descendant_depth')
    def max_descendant_depth(self, path: str) -> int:
        paths = CategoryModel.objects.filter(
            path__startswith=descendant_prefix(path)
        ).values_list('path', flat=True)
        return max((path_depth(p) for p in paths), default=0)

    @_store_errors('max_descendant_path_length')
    def max_descendant_path_length(self, path: str) -> int:
        longest = CategoryModel.objects.filter(
            path__startswith=descendant_prefix(path)
        ).aggregate(longest=Max(Length('path')))['longest']
        return longest or 0

    @_store_errors('count_children')
    def count_children(self, category_id: UUID) -> int:
        return CategoryModel.objects.filter(parent_id=category_id).count()

    @_store_errors('count_part_references')
    def count_part_references(self, category_id: UUID) -> int:
        return PartVersionCategory.objects.filter(category_id=category_id).count()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @_store_errors('add')
    def add(self, category: Category) -> Category:
        row = CategoryModel(
            id=category.id,
            name=category.name,
            label=category.label,
            path=category.path,
            parent_id=category.parent_id,
            description=category.description,
            is_public=category.is_public,
            created_by_id=category.created_by,
            updated_by_id=category.updated_by or category.created_by,
        )
        self._save_row(row, category, force_insert=True)
        return _to_entity(row)

    @_store_errors('save')
    def save(self, category: Category, fields: List[str]) -> Category:
        row = CategoryModel.objects.get(pk=category.id)
        update_fields = ['updated_at', 'version']
        for attr in fields:
            field_name = WRITABLE_FIELDS[attr]
            setattr(row, row._meta.get_field(field_name).attname, getattr(category, attr))
            update_fields.append(field_name)
        self._save_row(row, category, update_fields=update_fields)
        return _to_entity(row)

    def _save_row(self, row: CategoryModel, category: Category, **save_kwargs) -> None:
        try:
            # Savepoint: a constraint failure must not poison the caller's transaction
            with transaction.atomic():
                row.save(**save_kwargs)
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise DuplicateNameException(category.label, category.parent_id) from exc
            raise

    @_store_errors('rewrite_subtree')
    def rewrite_subtree(self, old_path: str, new_path: str) -> int:
        if old_path == new_path:
            return 0
        rewritten = CategoryModel.objects.filter(
            path__startswith=descendant_prefix(old_path)
        ).update(
            path=Concat(
                Value(new_path),
                Substr('path', len(old_path) + 1),
                output_field=TextField(),
            ),
            version=F('version') + 1,
            updated_at=timezone.now(),
        )
        logger.debug("Rewrote %d descendant paths %s -> %s", rewritten, old_path, new_path)
        return rewritten

    @_store_errors('soft_delete')
    def soft_delete(self, category_id: UUID, deleted_by: Optional[UUID]) -> None:
        row = CategoryModel.objects.get(pk=category_id)
        row.soft_delete(user_id=deleted_by)

    @_store_errors('touch')
    def touch(self, category_id: UUID, user_id: Optional[UUID]) -> None:
        CategoryModel.objects.filter(pk=category_id).update(
            updated_by_id=user_id,
            updated_at=timezone.now(),
            version=F('version') + 1,
        )

    # -------------------------------------------------------------------------
    # Custom fields
    # -------------------------------------------------------------------------

    @_store_errors('get_custom_fields')
    def get_custom_fields(self, category_id: UUID) -> List[CustomFieldValue]:
        rows = CategoryCustomField.objects.filter(category_id=category_id)
        return [
            CustomFieldValue(
                field_name=row.field_name,
                value=row.field_value,
                data_type=CustomFieldDataType(row.data_type),
            )
            for row in rows
        ]

    @_store_errors('replace_custom_fields')
    def replace_custom_fields(
        self,
        category_id: UUID,
        values: List[CustomFieldValue],
        user_id: Optional[UUID]
    ) -> None:
        CategoryCustomField.objects.filter(category_id=category_id).delete()
        CategoryCustomField.objects.bulk_create([
            CategoryCustomField(
                category_id=category_id,
                field_name=value.field_name,
                field_value=value.value,
                data_type=value.data_type.value,
                created_by_id=user_id,
            )
            for value in values
        ])
