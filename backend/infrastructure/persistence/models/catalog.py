"""
Catalog ORM Models.

Category taxonomy of the parts catalog:
1. Category - node of the materialized-path tree
2. CategoryCustomField - custom field values attached to a category
3. PartVersionCategory - association of part versions with categories
"""

from django.db import models
from django.db.models import Q
from django.conf import settings

from domain.catalog.entities import CustomFieldDataType
from domain.catalog.paths import MAX_LABEL_LENGTH

from .base import BaseModelWithHistory, ActiveManager, AllObjectsManager


class Category(BaseModelWithHistory):
    """
    Category of the parts catalog.

    `path` holds the sanitized labels from the root down to this node joined
    by '.', e.g. "passive_components.smd.0402". It is maintained by the
    category engine, never edited directly.
    """

    name = models.CharField(
        max_length=255,
        verbose_name="Name"
    )

    # Sanitized form of `name`; last segment of `path`
    label = models.CharField(
        max_length=MAX_LABEL_LENGTH,
        verbose_name="Path label"
    )

    path = models.TextField(
        db_index=True,
        verbose_name="Materialized path"
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
        verbose_name="Parent category"
    )

    description = models.TextField(
        blank=True,
        null=True,
        verbose_name="Description"
    )

    is_public = models.BooleanField(
        default=True,
        db_index=True,
        verbose_name="Public"
    )

    objects = ActiveManager()
    all_objects = AllObjectsManager()

    class Meta:
        db_table = 'catalog_categories'
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'
        ordering = ['path']
        base_manager_name = 'all_objects'
        constraints = [
            models.UniqueConstraint(
                fields=['parent', 'label'],
                condition=Q(deleted_at__isnull=True),
                name='uq_category_sibling_label',
            ),
            # NULL parents never collide in the constraint above
            models.UniqueConstraint(
                fields=['label'],
                condition=Q(parent__isnull=True, deleted_at__isnull=True),
                name='uq_category_root_label',
            ),
        ]

    def __str__(self):
        return self.name


class CategoryCustomField(models.Model):
    """Custom field value of a category (side table keyed by category)."""

    DATA_TYPE_CHOICES = [(t.value, t.value.capitalize()) for t in CustomFieldDataType]

    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name='custom_field_values',
        verbose_name="Category"
    )

    field_name = models.CharField(
        max_length=100,
        verbose_name="Field name"
    )

    field_value = models.JSONField(
        null=True,
        verbose_name="Value"
    )

    data_type = models.CharField(
        max_length=20,
        choices=DATA_TYPE_CHOICES,
        default=CustomFieldDataType.TEXT.value,
        verbose_name="Data type"
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='category_custom_fields_created',
        verbose_name="Created by"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created at"
    )

    class Meta:
        db_table = 'catalog_category_custom_fields'
        verbose_name = 'Category custom field'
        verbose_name_plural = 'Category custom fields'
        ordering = ['field_name']
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'field_name'],
                name='uq_category_custom_field_name',
            ),
        ]

    def __str__(self):
        return f"{self.category_id}:{self.field_name}"


class PartVersionCategory(models.Model):
    """
    Association of a part version with a category.

    Part versions are owned by the parts module; only the identifier is
    kept here. PROTECT keeps a referenced category from being hard-deleted.
    """

    part_version_id = models.UUIDField(
        db_index=True,
        verbose_name="Part version ID"
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='part_versions',
        verbose_name="Category"
    )

    class Meta:
        db_table = 'catalog_part_version_categories'
        verbose_name = 'Part version category'
        verbose_name_plural = 'Part version categories'
        constraints = [
            models.UniqueConstraint(
                fields=['part_version_id', 'category'],
                name='uq_part_version_category',
            ),
        ]

    def __str__(self):
        return f"{self.part_version_id} -> {self.category_id}"
