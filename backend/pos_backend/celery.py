import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pos_backend.settings")

app = Celery("pos_backend")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

app.conf.beat_schedule = {
    # Completed orders carry an expires_at stamp; this sweeps them.
    "purge-expired-orders": {
        "task": "orders.tasks.purge_expired_orders",
        "schedule": crontab(minute="*/15"),
    },
    "purge-expired-category-revenue": {
        "task": "revenue.tasks.purge_expired_category_revenue",
        "schedule": crontab(hour=0, minute=30),
    },
}
