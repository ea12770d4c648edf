"""
Revenue ledger: atomic bucket increments on the write side, aggregate reports
on the read side.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal

from django.db.models import Count, F, Sum
from django.utils import timezone

from orders.config import order_settings
from orders.services.ports import RevenueLedger
from orders.services.pricing import normalize_category

from .models import RevenueByCategoryDay, RevenueDay
from .timezone_utils import TimezoneUtils

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class RevenueLedgerService(RevenueLedger):
    """
    Buckets are created on first use and then only moved with F() updates, so
    concurrent completions on the same day never lose an increment.
    """

    def increment_daily(self, day, amount, count=1):
        RevenueDay.objects.get_or_create(date=day)
        RevenueDay.objects.filter(date=day).update(
            amount=F("amount") + Decimal(amount),
            order_count=F("order_count") + count,
            updated_at=timezone.now(),
        )
        logger.info(f"Revenue for {day} increased by {amount} ({count} order(s))")

    def increment_category(self, day, category, revenue, quantity, count=1, display_name=None):
        key = normalize_category(category)
        RevenueByCategoryDay.objects.get_or_create(
            date=day,
            category=key,
            defaults={
                "display_name": display_name or category or key,
                "expires_at": self._category_expiry(day),
            },
        )
        RevenueByCategoryDay.objects.filter(date=day, category=key).update(
            total_revenue=F("total_revenue") + Decimal(revenue),
            total_quantity=F("total_quantity") + quantity,
            order_count=F("order_count") + count,
            updated_at=timezone.now(),
        )

    @staticmethod
    def _category_expiry(day):
        retention_days = order_settings.category_revenue_retention_days
        if not retention_days:
            return None
        return TimezoneUtils.start_of_day(day + timedelta(days=retention_days))


class RevenueReportService:
    """Read-only revenue summaries for the admin dashboard."""

    @staticmethod
    def _totals(queryset) -> dict:
        totals = queryset.aggregate(amount=Sum("amount"), orders=Sum("order_count"))
        return {
            "amount": totals["amount"] or ZERO,
            "order_count": totals["orders"] or 0,
        }

    @staticmethod
    def today() -> dict:
        day = TimezoneUtils.business_date()
        row = RevenueDay.objects.filter(date=day).first()
        return {
            "date": day,
            "amount": row.amount if row else ZERO,
            "order_count": row.order_count if row else 0,
        }

    @staticmethod
    def total() -> dict:
        totals = RevenueReportService._totals(RevenueDay.objects.all())
        totals["days"] = RevenueDay.objects.count()
        return totals

    @staticmethod
    def date_range(start: date, end: date) -> dict:
        """Per-day rows and totals for `start`..`end`, both days inclusive."""
        if start > end:
            raise ValueError("start_date must not be after end_date")
        queryset = RevenueDay.objects.filter(date__gte=start, date__lte=end).order_by("date")
        totals = RevenueReportService._totals(queryset)
        return {
            "start_date": start,
            "end_date": end,
            "days": [
                {"date": row.date, "amount": row.amount, "order_count": row.order_count}
                for row in queryset
            ],
            "total_amount": totals["amount"],
            "total_orders": totals["order_count"],
        }

    @staticmethod
    def stats() -> dict:
        today = TimezoneUtils.business_date()
        week_start = TimezoneUtils.week_start(today)
        month_start = today.replace(day=1)

        def summary(queryset):
            totals = RevenueReportService._totals(queryset)
            return {"amount": totals["amount"], "order_count": totals["order_count"]}

        return {
            "today": summary(RevenueDay.objects.filter(date=today)),
            "this_week": summary(RevenueDay.objects.filter(date__gte=week_start, date__lte=today)),
            "this_month": summary(RevenueDay.objects.filter(date__gte=month_start, date__lte=today)),
            "all_time": summary(RevenueDay.objects.all()),
        }

    @staticmethod
    def categories(start: date, end: date) -> list:
        """Per-category totals across `start`..`end`, highest revenue first."""
        if start > end:
            raise ValueError("start_date must not be after end_date")
        rows = (
            RevenueByCategoryDay.objects.filter(date__gte=start, date__lte=end)
            .values("category")
            .annotate(
                total_revenue=Sum("total_revenue"),
                total_quantity=Sum("total_quantity"),
                order_count=Sum("order_count"),
                days=Count("id"),
            )
            .order_by("-total_revenue", "category")
        )
        names = dict(
            RevenueByCategoryDay.objects.filter(date__gte=start, date__lte=end)
            .order_by("date")
            .values_list("category", "display_name")
        )
        return [dict(row, display_name=names.get(row["category"]) or row["category"]) for row in rows]
