"""
Catalog application services: the category hierarchy engine.
"""

from .closure import PathPrefixClosureOracle
from .custom_fields import CustomFieldService
from .hierarchy import HierarchyIndex
from .integrity import IntegrityIssue, IntegrityReport, IssueType, PathIntegrityChecker
from .move import MoveEngine
from .service import CategoryService, build_category_service
from .store import CategoryStore

__all__ = [
    'CategoryService',
    'CategoryStore',
    'CustomFieldService',
    'HierarchyIndex',
    'IntegrityIssue',
    'IntegrityReport',
    'IssueType',
    'MoveEngine',
    'PathIntegrityChecker',
    'PathPrefixClosureOracle',
    'build_category_service',
]
