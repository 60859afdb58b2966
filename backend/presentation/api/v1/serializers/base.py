"""
Base Serializers.

Common serializer mixins and base classes.
"""

from rest_framework import serializers


class AuditFieldsMixin(serializers.Serializer):
    """Mixin for audit fields (created_at, updated_at, etc.)"""

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
    created_by = serializers.UUIDField(read_only=True)
    updated_by = serializers.UUIDField(read_only=True)


class VersionedFieldsMixin(serializers.Serializer):
    """Mixin for versioned fields."""

    version = serializers.IntegerField(read_only=True)


class RecursiveSerializer(serializers.Serializer):
    """Serializer for recursive tree structures."""

    def to_representation(self, instance):
        serializer = self.parent.parent.__class__(instance, context=self.context)
        return serializer.data


class HistoryRecordSerializer(serializers.Serializer):
    """One django-simple-history record."""

    id = serializers.IntegerField(source='history_id', read_only=True)
    date = serializers.DateTimeField(source='history_date', read_only=True)
    user = serializers.StringRelatedField(source='history_user', read_only=True)
    type = serializers.CharField(source='history_type', read_only=True)
    changes = serializers.CharField(source='history_change_reason', read_only=True)
