"""
Celery application for background notification tasks.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("eventsphere")

# All CELERY_* keys in Django settings configure the worker
app.config_from_object("django.conf:settings", namespace="CELERY")

app.conf.update(
    timezone="Asia/Kolkata",
    task_track_started=True,
    task_time_limit=120,
    task_acks_late=True,
)

app.autodiscover_tasks()
