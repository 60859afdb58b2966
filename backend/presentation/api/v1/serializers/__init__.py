"""
Serializers Package.

All API serializers for the category service.
"""

from .base import HistoryRecordSerializer, RecursiveSerializer

from .catalog import (
    CategorySerializer,
    CategoryDetailSerializer,
    CategoryTreeSerializer,
    CategoryCreateSerializer,
    CategoryUpdateSerializer,
    CategoryMoveSerializer,
    CategoryCustomFieldsSerializer,
    CategorySearchSerializer,
)
