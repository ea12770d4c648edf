import django_filters

from revenue.timezone_utils import TimezoneUtils

from .models import Order
from .services.query_service import ALL_STATUSES
from .services.tables import normalize_table_numbers, table_token


class OrderFilter(django_filters.FilterSet):
    """
    Admin order listing filters.

    `start_date`/`end_date` are business-local calendar days; the end day is
    included up to its last microsecond.
    """

    status = django_filters.CharFilter(method="filter_status")
    table = django_filters.CharFilter(method="filter_table")
    start_date = django_filters.DateFilter(method="filter_start_date")
    end_date = django_filters.DateFilter(method="filter_end_date")

    class Meta:
        model = Order
        fields = ["status", "table", "start_date", "end_date"]

    def filter_status(self, queryset, name, value):
        if not value or value == ALL_STATUSES:
            return queryset
        return queryset.filter(status=value)

    def filter_table(self, queryset, name, value):
        numbers = normalize_table_numbers(value)
        if not numbers:
            return queryset
        return queryset.filter(table_key__contains=table_token(numbers[0]))

    def filter_start_date(self, queryset, name, value):
        return queryset.filter(created_at__gte=TimezoneUtils.start_of_day(value))

    def filter_end_date(self, queryset, name, value):
        return queryset.filter(created_at__lte=TimezoneUtils.end_of_day(value))
