"""
User Models.

Custom user model referenced by every audit field. Authentication itself
is handled by Django and djangorestframework-simplejwt.
"""

import uuid

from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Custom User model.

    Extends Django's AbstractUser with a UUID primary key so that audit
    references (created_by, updated_by, deleted_by) are opaque identifiers.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    email = models.EmailField(
        blank=True,
        verbose_name="Email"
    )

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['last_name', 'first_name', 'username']

    def __str__(self):
        return self.get_full_name() or self.username
