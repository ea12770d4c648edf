from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.exceptions import OrderError
from orders.serializers import OrderHistorySerializer, OrderSerializer
from orders.services.query_service import OrderQueryService
from orders.services.tables import normalize_table_numbers
from pos_backend.exceptions import error_response, service_error_response


class QueryActionsMixin:
    """
    Mixin for read-only order lookups used by the kitchen display.
    """

    def _orders_response(self, queryset, **extra):
        orders = OrderSerializer(queryset, many=True).data
        return Response({"success": True, "count": len(orders), "orders": orders, **extra})

    def _requested_tables(self, request: Request):
        raw = request.query_params.get("tables")
        if not raw:
            return None, error_response(
                "tables query parameter is required (e.g. ?tables=4,5)",
                status.HTTP_400_BAD_REQUEST,
                code="tables_required",
            )
        tables = normalize_table_numbers(raw)
        if not tables:
            return None, error_response(
                "No valid table numbers provided",
                status.HTTP_400_BAD_REQUEST,
                code="invalid_tables",
            )
        return tables, None

    @action(detail=False, methods=["get"], url_path="current")
    def current(self, request: Request) -> Response:
        """Orders still on the line (or `?status=` / `?status=all`), optionally for one `?table=`."""
        queryset = OrderQueryService.current_orders(
            status=request.query_params.get("status", "preparing"),
            table=request.query_params.get("table"),
        )
        return self._orders_response(queryset)

    @action(detail=False, methods=["get"], url_path="by-tables")
    def by_tables(self, request: Request) -> Response:
        """Orders seated at any of `?tables=`."""
        tables, error = self._requested_tables(request)
        if error:
            return error
        queryset = OrderQueryService.orders_with_any_table(tables, request.query_params.get("status"))
        return self._orders_response(queryset, tables=tables)

    @action(detail=False, methods=["get"], url_path="by-combined-tables")
    def by_combined_tables(self, request: Request) -> Response:
        """Orders seated at all of `?tables=` (possibly more)."""
        tables, error = self._requested_tables(request)
        if error:
            return error
        queryset = OrderQueryService.orders_with_all_tables(tables, request.query_params.get("status"))
        return self._orders_response(queryset, tables=tables)

    @action(detail=False, methods=["get"], url_path="by-exact-tables")
    def by_exact_tables(self, request: Request) -> Response:
        """Orders seated at exactly the tables in `?tables=`."""
        tables, error = self._requested_tables(request)
        if error:
            return error
        queryset = OrderQueryService.orders_with_exact_tables(tables, request.query_params.get("status"))
        return self._orders_response(queryset, tables=tables)

    @action(detail=True, methods=["get"], url_path="history")
    def history(self, request: Request, pk=None) -> Response:
        try:
            order = OrderQueryService.get_history(pk)
        except OrderError as e:
            return service_error_response(e)
        return Response({"success": True, **OrderHistorySerializer(order).data})
