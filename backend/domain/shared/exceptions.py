"""
Domain Exceptions.

Custom exceptions for domain-level errors.
These exceptions represent business rule violations and are recoverable
at the caller boundary.
"""

from typing import Optional, Any, Dict


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "DOMAIN_ERROR"
        self.details = details or {}


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            message=f"{entity_type} with id '{entity_id}' not found",
            code="ENTITY_NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": str(entity_id)}
        )


class EntityAlreadyExistsException(DomainException):
    """Raised when trying to create an entity that already exists."""

    def __init__(self, entity_type: str, identifier: Any):
        super().__init__(
            message=f"{entity_type} with identifier '{identifier}' already exists",
            code="ENTITY_ALREADY_EXISTS",
            details={"entity_type": entity_type, "identifier": str(identifier)}
        )


class DuplicateNameException(EntityAlreadyExistsException):
    """Raised when a sibling with the same sanitized label already exists."""

    def __init__(self, label: str, parent_id: Any = None):
        super().__init__("Category", label)
        scope = f"under parent '{parent_id}'" if parent_id else "at root level"
        self.message = f"Category with label '{label}' already exists {scope}"
        self.args = (self.message,)
        self.code = "DUPLICATE_NAME"
        self.details["parent_id"] = str(parent_id) if parent_id else None


class InvalidParentException(DomainException):
    """Raised when the requested parent does not exist or was deleted."""

    def __init__(self, parent_id: Any):
        super().__init__(
            message=f"Invalid parent category '{parent_id}'",
            code="INVALID_PARENT",
            details={"parent_id": str(parent_id)}
        )


class ValidationException(DomainException):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None}
        )


class CircularReferenceException(DomainException):
    """Raised when a node would become its own ancestor."""

    def __init__(self, item_ids: list):
        super().__init__(
            message="Cannot move category under itself or one of its descendants",
            code="CIRCULAR_REFERENCE",
            details={"item_ids": [str(id) for id in item_ids]}
        )


class BusinessRuleViolationException(DomainException):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str):
        super().__init__(
            message=message,
            code="BUSINESS_RULE_VIOLATION",
            details={"rule": rule}
        )


class HasChildrenException(BusinessRuleViolationException):
    """Raised when deleting a category that still has live children."""

    def __init__(self, category_id: Any, child_count: int):
        super().__init__(
            rule="category_has_children",
            message=f"Category '{category_id}' cannot be deleted: it has {child_count} child categories",
        )
        self.code = "HAS_CHILDREN"
        self.details.update({"category_id": str(category_id), "child_count": child_count})


class ReferencedByPartsException(BusinessRuleViolationException):
    """Raised when deleting a category that part versions still reference."""

    def __init__(self, category_id: Any, parts_count: int):
        super().__init__(
            rule="category_referenced_by_parts",
            message=f"Category '{category_id}' cannot be deleted: it is referenced by {parts_count} part versions",
        )
        self.code = "REFERENCED_BY_PARTS"
        self.details.update({"category_id": str(category_id), "parts_count": parts_count})


class StoreException(DomainException):
    """
    Raised when the backing store fails unexpectedly.

    Wraps connection losses and constraint violations that have no
    domain meaning. Callers decide the retry policy.
    """

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Store failure during '{operation}': {reason}",
            code="STORE_ERROR",
            details={"operation": operation}
        )
