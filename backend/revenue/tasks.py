import logging

from celery import shared_task
from django.utils import timezone

from .models import RevenueByCategoryDay

logger = logging.getLogger(__name__)


@shared_task
def purge_expired_category_revenue():
    """
    Drop per-category rows past their expiry. Rows only carry an expiry when
    CATEGORY_REVENUE_RETENTION_DAYS is configured; daily totals are never purged.
    """
    expired = RevenueByCategoryDay.objects.filter(expires_at__isnull=False, expires_at__lte=timezone.now())
    count = expired.count()
    if count:
        expired.delete()
        logger.info(f"Purged {count} expired category revenue row(s)")
    return {"status": "success", "purged": count}
