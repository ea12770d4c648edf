from datetime import date, datetime, timedelta

import pytz
from django.test import override_settings

from revenue.timezone_utils import TimezoneUtils

UTC = pytz.UTC


class TestBusinessDate:
    @override_settings(BUSINESS_TIME_ZONE="America/New_York")
    def test_late_evening_belongs_to_local_day(self):
        # 02:30 UTC on the 16th is still the evening of the 15th in New York.
        moment = UTC.localize(datetime(2024, 3, 16, 2, 30))
        assert TimezoneUtils.business_date(moment) == date(2024, 3, 15)

    @override_settings(BUSINESS_TIME_ZONE="Asia/Bangkok")
    def test_early_utc_morning_is_next_local_day(self):
        moment = UTC.localize(datetime(2024, 3, 15, 20, 0))
        assert TimezoneUtils.business_date(moment) == date(2024, 3, 16)

    @override_settings(BUSINESS_TIME_ZONE="Not/AZone")
    def test_unknown_zone_falls_back_to_time_zone(self):
        assert TimezoneUtils.get_business_timezone().zone == "UTC"


class TestDayBoundaries:
    @override_settings(BUSINESS_TIME_ZONE="America/New_York")
    def test_start_and_end_of_day(self):
        start = TimezoneUtils.start_of_day(date(2024, 7, 4))
        end = TimezoneUtils.end_of_day(date(2024, 7, 4))

        assert start.astimezone(UTC) == UTC.localize(datetime(2024, 7, 4, 4, 0))
        assert end - start == timedelta(days=1) - timedelta(microseconds=1)

    @override_settings(BUSINESS_TIME_ZONE="America/New_York")
    def test_next_midnight_across_dst_change(self):
        # Clocks go back on 2024-11-03; the day is 25 hours long.
        moment = UTC.localize(datetime(2024, 11, 3, 12, 0))

        midnight = TimezoneUtils.next_midnight(moment)

        assert midnight.astimezone(UTC) == UTC.localize(datetime(2024, 11, 4, 5, 0))

    @override_settings(BUSINESS_TIME_ZONE="UTC")
    def test_next_midnight_is_strictly_after(self):
        moment = UTC.localize(datetime(2024, 1, 1, 0, 0))
        assert TimezoneUtils.next_midnight(moment) == UTC.localize(datetime(2024, 1, 2, 0, 0))


class TestWeekStart:
    def test_week_starts_on_sunday(self):
        assert TimezoneUtils.week_start(date(2024, 6, 12)) == date(2024, 6, 9)  # Wednesday

    def test_sunday_is_its_own_week_start(self):
        assert TimezoneUtils.week_start(date(2024, 6, 9)) == date(2024, 6, 9)

    def test_saturday(self):
        assert TimezoneUtils.week_start(date(2024, 6, 15)) == date(2024, 6, 9)
