import logging

from django.db import IntegrityError
from django.db.models.deletion import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from domain.shared.exceptions import (
    BusinessRuleViolationException,
    CircularReferenceException,
    DomainException,
    DuplicateNameException,
    EntityAlreadyExistsException,
    EntityNotFoundException,
    HasChildrenException,
    InvalidParentException,
    ReferencedByPartsException,
    StoreException,
    ValidationException,
)

logger = logging.getLogger(__name__)


# Most specific classes first
DOMAIN_STATUS_CODES = (
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (InvalidParentException, status.HTTP_400_BAD_REQUEST),
    (CircularReferenceException, status.HTTP_400_BAD_REQUEST),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (DuplicateNameException, status.HTTP_409_CONFLICT),
    (EntityAlreadyExistsException, status.HTTP_409_CONFLICT),
    (HasChildrenException, status.HTTP_409_CONFLICT),
    (ReferencedByPartsException, status.HTTP_409_CONFLICT),
    (BusinessRuleViolationException, status.HTTP_409_CONFLICT),
    (StoreException, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def domain_status_code(exc: DomainException) -> int:
    for exc_class, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc, context):
    """
    Map domain exceptions to HTTP responses, then fall back to DRF.
    """
    if isinstance(exc, DomainException):
        status_code = domain_status_code(exc)
        if status_code >= 500:
            logger.error("Domain failure in %s: %s", context.get('view'), exc.message)
        return Response(
            {
                'detail': exc.message,
                'error': exc.code.lower(),
                'details': exc.details,
            },
            status=status_code,
        )

    if isinstance(exc, ProtectedError):
        protected = [str(o) for o in list(exc.protected_objects)[:5]]
        return Response(
            {
                'detail': 'Cannot delete object: it is referenced by other records.',
                'error': 'protected_error',
                'protected_objects_sample': protected,
            },
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, IntegrityError):
        return Response(
            {
                'detail': 'Data integrity violation.',
                'error': 'integrity_error',
            },
            status=status.HTTP_409_CONFLICT,
        )

    return exception_handler(exc, context)
