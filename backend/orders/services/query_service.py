"""
Read-only order lookups used by the kitchen display and admin screens.
"""
from typing import Iterable, Optional

from django.core.exceptions import ValidationError
from django.db.models import Prefetch, Q

from orders.exceptions import OrderNotFound
from orders.models import Order, OrderLine

from .tables import normalize_table_numbers, table_key, table_token


ALL_STATUSES = "all"


class OrderQueryService:
    @staticmethod
    def base_queryset():
        return Order.objects.prefetch_related(
            Prefetch("lines", queryset=OrderLine.objects.order_by("position", "id"))
        )

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return OrderQueryService.base_queryset().get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise OrderNotFound(order_id)

    @staticmethod
    def get_history(order_id) -> Order:
        try:
            return Order.objects.prefetch_related("update_history").get(pk=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise OrderNotFound(order_id)

    @staticmethod
    def filter_status(queryset, status: Optional[str] = Order.Status.PREPARING):
        if not status or status == ALL_STATUSES:
            return queryset
        return queryset.filter(status=status)

    @staticmethod
    def current_orders(status: Optional[str] = Order.Status.PREPARING, table=None):
        """Orders in `status` (all statuses for "all"), optionally seated at one table."""
        queryset = OrderQueryService.filter_status(OrderQueryService.base_queryset(), status)
        if table not in (None, ""):
            numbers = normalize_table_numbers(table)
            if not numbers:
                return queryset.none()
            queryset = queryset.filter(table_key__contains=table_token(numbers[0]))
        return queryset.order_by("-created_at")

    @staticmethod
    def orders_with_any_table(tables: Iterable[int], status: Optional[str] = None):
        condition = Q()
        for number in tables:
            condition |= Q(table_key__contains=table_token(number))
        queryset = OrderQueryService.filter_status(OrderQueryService.base_queryset(), status)
        return queryset.filter(condition).order_by("-created_at")

    @staticmethod
    def orders_with_all_tables(tables: Iterable[int], status: Optional[str] = None):
        queryset = OrderQueryService.filter_status(OrderQueryService.base_queryset(), status)
        for number in tables:
            queryset = queryset.filter(table_key__contains=table_token(number))
        return queryset.order_by("-created_at")

    @staticmethod
    def orders_with_exact_tables(tables: Iterable[int], status: Optional[str] = None):
        queryset = OrderQueryService.filter_status(OrderQueryService.base_queryset(), status)
        return queryset.filter(table_key=table_key(list(tables))).order_by("-created_at")

