"""
Catalog Serializers.

Categories cross the API as domain records, so these are plain
serializers over `domain.catalog.entities`, not ModelSerializers.
"""

from rest_framework import serializers

from domain.catalog.paths import MAX_LABEL_LENGTH
from .base import AuditFieldsMixin, RecursiveSerializer, VersionedFieldsMixin


# =============================================================================
# Output
# =============================================================================

class CategorySerializer(AuditFieldsMixin, VersionedFieldsMixin, serializers.Serializer):
    """Category record as returned by lists, search, children and breadcrumbs."""

    id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    path = serializers.CharField(read_only=True)
    depth = serializers.IntegerField(read_only=True)
    parent_id = serializers.UUIDField(read_only=True, allow_null=True)
    parent_name = serializers.CharField(read_only=True, allow_null=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    is_public = serializers.BooleanField(read_only=True)


class CategoryDetailSerializer(CategorySerializer):
    """Single category with custom fields and counts (`counts` in context)."""

    custom_fields = serializers.DictField(read_only=True)
    child_count = serializers.SerializerMethodField()
    parts_count = serializers.SerializerMethodField()

    def get_child_count(self, obj):
        return self.context.get('counts', {}).get('child_count', 0)

    def get_parts_count(self, obj):
        return self.context.get('counts', {}).get('parts_count', 0)


class CategoryTreeSerializer(serializers.Serializer):
    """Nested tree node."""

    id = serializers.UUIDField(source='category.id', read_only=True)
    name = serializers.CharField(source='category.name', read_only=True)
    path = serializers.CharField(source='category.path', read_only=True)
    is_public = serializers.BooleanField(source='category.is_public', read_only=True)
    children = RecursiveSerializer(many=True, read_only=True)


# =============================================================================
# Input
# =============================================================================

class CategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=MAX_LABEL_LENGTH)
    parent_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    is_public = serializers.BooleanField(required=False, default=True)
    custom_fields = serializers.DictField(required=False, allow_null=True, default=None)


class CategoryUpdateSerializer(serializers.Serializer):
    """Partial update; only the keys present in the payload are applied."""

    name = serializers.CharField(max_length=MAX_LABEL_LENGTH, required=False)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    is_public = serializers.BooleanField(required=False)


class CategoryMoveSerializer(serializers.Serializer):
    """`parent_id: null` moves the category to the root level."""

    parent_id = serializers.UUIDField(allow_null=True)


class CategoryCustomFieldsSerializer(serializers.Serializer):
    custom_fields = serializers.DictField(allow_empty=True)


class CategorySearchSerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')
    is_public = serializers.BooleanField(required=False, allow_null=True, default=None)
    created_by = serializers.UUIDField(required=False, allow_null=True, default=None)
