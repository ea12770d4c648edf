import logging

from celery import shared_task
from django.utils import timezone

from .models import Order

logger = logging.getLogger(__name__)


@shared_task
def purge_expired_orders():
    """Delete completed orders whose retention window has passed. Revenue rows are kept."""
    now = timezone.now()
    expired = Order.objects.filter(status=Order.Status.COMPLETED, expires_at__lte=now)
    count = expired.count()
    if count:
        expired.delete()
        logger.info(f"Purged {count} expired completed order(s)")
    return {"status": "success", "purged": count}
