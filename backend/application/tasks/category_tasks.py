"""
Category Tasks.

Celery tasks for category tree maintenance.
"""

from celery import shared_task
from django.apps import apps
import logging

from domain.shared.exceptions import StoreException

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def verify_category_paths(self, repair: bool = False):
    """
    Verify stored category paths against the parent links.

    Reports:
    - Paths that differ from the parent chain (rewritten when `repair` is set)
    - Categories whose parent is missing or deleted
    - Parent chains that loop
    - Sibling label collisions
    """
    service = apps.get_app_config('persistence').category_service

    try:
        report = service.verify_paths(repair=repair)
    except StoreException as e:
        logger.error(f"Category path verification failed: {e.message}")
        raise self.retry(exc=e, countdown=60)

    logger.info(
        f"Category path verification: {report.checked} checked, "
        f"{len(report.issues)} issues, {report.repaired} repaired"
    )
    return report.to_dict()
