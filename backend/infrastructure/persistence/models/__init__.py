"""
Persistence Models Package.

All Django ORM models for the catalog backend.
"""

# Base mixins and managers
from .base import (
    TimeStampedMixin,
    SoftDeleteMixin,
    VersionedMixin,
    AuditMixin,
    BaseModel,
    BaseModelWithHistory,
    ActiveManager,
    AllObjectsManager,
)

# User models
from .users import User

# Catalog models
from .catalog import (
    Category,
    CategoryCustomField,
    PartVersionCategory,
)

__all__ = [
    'TimeStampedMixin',
    'SoftDeleteMixin',
    'VersionedMixin',
    'AuditMixin',
    'BaseModel',
    'BaseModelWithHistory',
    'ActiveManager',
    'AllObjectsManager',
    'User',
    'Category',
    'CategoryCustomField',
    'PartVersionCategory',
]
