"""
Celery configuration for TaskCatalyst project.
"""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('taskcatalyst')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

# Celery Beat Schedule
app.conf.beat_schedule = {
    'reset-stale-streaks': {
        'task': 'apps.engagement.tasks.reset_stale_streaks',
        'schedule': crontab(hour='0', minute='5'),
    },
}
