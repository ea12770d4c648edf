"""
Business-date helpers for revenue and order retention.
"""
import logging
from datetime import date, datetime, time, timedelta

import pytz
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


class TimezoneUtils:
    """Date arithmetic in the restaurant's own time zone rather than UTC."""

    @staticmethod
    def get_business_timezone():
        name = getattr(settings, "BUSINESS_TIME_ZONE", None) or settings.TIME_ZONE
        try:
            return pytz.timezone(name)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown BUSINESS_TIME_ZONE {name!r}, falling back to {settings.TIME_ZONE}")
            return pytz.timezone(settings.TIME_ZONE)

    @staticmethod
    def localize(moment: datetime) -> datetime:
        tz = TimezoneUtils.get_business_timezone()
        if timezone.is_naive(moment):
            return tz.localize(moment)
        return moment.astimezone(tz)

    @staticmethod
    def business_date(moment: datetime = None) -> date:
        """Calendar date of `moment` (default: now) in the business time zone."""
        return TimezoneUtils.localize(moment or timezone.now()).date()

    @staticmethod
    def start_of_day(day: date) -> datetime:
        tz = TimezoneUtils.get_business_timezone()
        return tz.localize(datetime.combine(day, time.min))

    @staticmethod
    def end_of_day(day: date) -> datetime:
        return TimezoneUtils.start_of_day(day + timedelta(days=1)) - timedelta(microseconds=1)

    @staticmethod
    def next_midnight(moment: datetime = None) -> datetime:
        """First business-local midnight strictly after `moment`."""
        day = TimezoneUtils.business_date(moment)
        return TimezoneUtils.start_of_day(day + timedelta(days=1))

    @staticmethod
    def week_start(day: date) -> date:
        """Sunday on or before `day`."""
        return day - timedelta(days=(day.weekday() + 1) % 7)
