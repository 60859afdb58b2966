"""
Consistency check of stored paths against the parent links.

The parent link is authoritative: the expected path of a category is the
expected path of its parent joined with the sanitized name.
"""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple
from uuid import UUID

from domain.catalog.entities import Category
from domain.catalog.paths import build_path, sanitize_label
from domain.catalog.repositories import CategoryRepository

logger = logging.getLogger(__name__)


class IssueType(str, Enum):
    PATH_MISMATCH = 'path_mismatch'
    ORPHAN = 'orphan'
    CYCLE = 'cycle'
    DUPLICATE_LABEL = 'duplicate_label'


@dataclass
class IntegrityIssue:
    issue_type: IssueType
    category_id: UUID
    message: str
    expected_path: Optional[str] = None
    actual_path: Optional[str] = None


@dataclass
class IntegrityReport:
    checked: int = 0
    repaired: int = 0
    issues: List[IntegrityIssue] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    def add(self, issue_type: IssueType, category: Category, message: str, expected_path: Optional[str] = None):
        self.issues.append(IntegrityIssue(
            issue_type=issue_type,
            category_id=category.id,
            message=message,
            expected_path=expected_path,
            actual_path=category.path,
        ))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form, used as the Celery task result."""
        data = asdict(self)
        for issue in data['issues']:
            issue['issue_type'] = issue['issue_type'].value
            issue['category_id'] = str(issue['category_id'])
        data['is_consistent'] = self.is_consistent
        return data


class PathIntegrityChecker:

    def __init__(self, repository: CategoryRepository):
        self._repository = repository

    def check(self, repair: bool = False) -> IntegrityReport:
        """
        Compare every live category's path with the one implied by its
        parent chain. With `repair`, mismatched rows are rewritten in one
        transaction; orphans, cycles and label collisions are only reported.
        """
        categories = self._repository.list_all()
        by_id = {category.id: category for category in categories}
        report = IntegrityReport(checked=len(categories))

        expected: Dict[UUID, Optional[str]] = {}
        for category in categories:
            self._resolve(category, by_id, expected, report)

        collisions = self._find_collisions(categories, report)

        mismatched: List[Tuple[Category, str]] = []
        for category in categories:
            path = expected.get(category.id)
            if path is None:
                continue
            if path != category.path or category.label != sanitize_label(category.name):
                report.add(
                    IssueType.PATH_MISMATCH,
                    category,
                    "Stored path does not match the parent chain",
                    expected_path=path,
                )
                if category.id not in collisions:
                    mismatched.append((category, path))

        if repair and mismatched:
            with self._repository.atomic():
                for category, path in mismatched:
                    category.label = sanitize_label(category.name)
                    category.path = path
                    self._repository.save(category, ['label', 'path'])
            report.repaired = len(mismatched)

        if report.issues:
            logger.warning(
                "Category path check found %d issue(s) in %d categories, repaired %d",
                len(report.issues), report.checked, report.repaired,
            )
        else:
            logger.info("Category path check: %d categories consistent", report.checked)
        return report

    def _resolve(
        self,
        category: Category,
        by_id: Dict[UUID, Category],
        expected: Dict[UUID, Optional[str]],
        report: IntegrityReport
    ) -> None:
        # Walk up until a node with a known expected path, then fill the chain
        # downwards. None marks a node whose path cannot be derived.
        chain: List[Category] = []
        on_chain: Set[UUID] = set()
        current = category
        while True:
            if current.id in expected:
                base = expected[current.id]
                break
            if current.id in on_chain:
                report.add(IssueType.CYCLE, current, "Parent chain loops back to this category")
                for node in chain:
                    expected[node.id] = None
                return
            if current.parent_id is None:
                base = build_path(None, sanitize_label(current.name))
                expected[current.id] = base
                break
            parent = by_id.get(current.parent_id)
            if parent is None:
                report.add(
                    IssueType.ORPHAN,
                    current,
                    f"Parent {current.parent_id} is missing or deleted",
                )
                expected[current.id] = None
                base = None
                break
            chain.append(current)
            on_chain.add(current.id)
            current = parent

        for node in reversed(chain):
            base = build_path(base, sanitize_label(node.name)) if base is not None else None
            expected[node.id] = base

    def _find_collisions(self, categories: List[Category], report: IntegrityReport) -> Set[UUID]:
        seen: Dict[Tuple[Optional[UUID], str], Category] = {}
        collisions: Set[UUID] = set()
        for category in categories:
            key = (category.parent_id, sanitize_label(category.name))
            first = seen.setdefault(key, category)
            if first is not category:
                report.add(
                    IssueType.DUPLICATE_LABEL,
                    category,
                    f"Label '{key[1]}' is also used by sibling {first.id}",
                )
                collisions.update((first.id, category.id))
        return collisions
