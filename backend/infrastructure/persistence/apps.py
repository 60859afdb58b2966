"""
Django app configuration of the persistence layer.
"""

from django.apps import AppConfig
from django.conf import settings


class PersistenceConfig(AppConfig):
    name = 'infrastructure.persistence'
    label = 'persistence'
    verbose_name = 'Catalog persistence'
    default_auto_field = 'django.db.models.BigAutoField'

    category_service = None

    def ready(self):
        from application.catalog import build_category_service
        from .repositories import DjangoCategoryRepository

        engine = settings.CATEGORY_ENGINE
        self.category_service = build_category_service(
            DjangoCategoryRepository(),
            max_depth=engine['MAX_DEPTH'],
            search_default_limit=engine['SEARCH_DEFAULT_LIMIT'],
            search_max_limit=engine['SEARCH_MAX_LIMIT'],
        )
