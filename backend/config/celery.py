"""
Celery configuration for the catalog backend.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('catalog')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Task modules live outside the Django apps
app.autodiscover_tasks(['application'], related_name='tasks.category_tasks')

# Configure task routes
app.conf.task_routes = {
    'application.tasks.category_tasks.*': {'queue': 'maintenance'},
}

# Configure task schedules (periodic tasks)
app.conf.beat_schedule = {
    'verify-category-paths': {
        'task': 'application.tasks.category_tasks.verify_category_paths',
        'schedule': crontab(hour=3, minute=0),  # Nightly, report only
        'kwargs': {'repair': False},
    },
}
