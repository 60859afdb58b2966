"""
Base ORM Models and Mixins.

Category rows carry a UUID key, timestamps, a soft-delete marker, a row
version and the acting users. The repository maps exactly these columns
onto `domain.shared.base_entity.AuditableEntity`.
"""

import uuid
from django.db import models
from django.conf import settings
from django.utils import timezone
from simple_history.models import HistoricalRecords


class TimeStampedMixin(models.Model):

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated at"
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Deleted rows stay in the table with their last path; live-only
    uniqueness constraints and the ActiveManager ignore them.
    """

    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name="Deleted at"
    )
    deleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_deleted",
        verbose_name="Deleted by"
    )

    class Meta:
        abstract = True

    def soft_delete(self, user_id=None):
        self.deleted_at = timezone.now()
        self.deleted_by_id = user_id
        self.save(update_fields=['deleted_at', 'deleted_by', 'updated_at', 'version'])


class VersionedMixin(models.Model):
    """Row version, bumped by every save() and by the subtree rewrite."""

    version = models.PositiveIntegerField(
        default=1,
        verbose_name="Version"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            self.version += 1
        super().save(*args, **kwargs)


class AuditMixin(models.Model):

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_created",
        verbose_name="Created by"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="%(class)s_updated",
        verbose_name="Updated by"
    )

    class Meta:
        abstract = True


class BaseModel(TimeStampedMixin, SoftDeleteMixin, VersionedMixin, AuditMixin):

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name="ID"
    )

    class Meta:
        abstract = True


class BaseModelWithHistory(BaseModel):
    """
    django-simple-history records every save(). Paths rewritten through
    QuerySet.update() during a move are not recorded.
    """

    history = HistoricalRecords(inherit=True)

    class Meta:
        abstract = True


# =============================================================================
# MANAGERS
# =============================================================================

class ActiveManager(models.Manager):
    """Live rows only."""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class AllObjectsManager(models.Manager):
    """Every row, deleted ones included."""

    pass
