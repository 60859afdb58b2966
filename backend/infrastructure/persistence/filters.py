"""
Category FilterSets.

Shared by the repository for list and search reads so that query-string
filters are parsed and validated in one place.
"""

import uuid

from django_filters import rest_framework as django_filters

from .models import Category


ROOT_PARENT = 'root'


class CategoryFilterSet(django_filters.FilterSet):
    """Optional visibility, owner and parent filters for category reads."""

    is_public = django_filters.BooleanFilter(field_name='is_public')
    created_by = django_filters.UUIDFilter(field_name='created_by_id')
    parent = django_filters.CharFilter(method='filter_parent')

    class Meta:
        model = Category
        fields = ['is_public', 'created_by', 'parent']

    def filter_parent(self, queryset, name, value):
        """`parent=root` selects roots, any other value must be a category id."""
        if value == ROOT_PARENT:
            return queryset.filter(parent__isnull=True)
        try:
            parent_id = uuid.UUID(str(value))
        except ValueError:
            return queryset.none()
        return queryset.filter(parent_id=parent_id)
