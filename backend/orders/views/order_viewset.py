import logging

from rest_framework import status, viewsets
from rest_framework.request import Request
from rest_framework.response import Response

from orders.exceptions import OrderError
from orders.filters import OrderFilter
from orders.serializers import OrderCreateSerializer, OrderSerializer, OrderUpdateSerializer
from orders.services.order_service import UNSET, OrderLifecycleService
from orders.services.query_service import OrderQueryService
from pos_backend.exceptions import service_error_response
from pos_backend.pagination import StandardPagination
from users.permissions import IsAdmin, IsAdminOrKitchen
from users.services import actor_id_for

from .query_actions import QueryActionsMixin
from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)


class OrderPagination(StandardPagination):
    results_key = "orders"


class OrderViewSet(StatusActionsMixin, QueryActionsMixin, viewsets.GenericViewSet):
    """
    Orders for the admin terminal and kitchen display.

    This viewset combines:
    - Create / update / delete and the admin listing (here)
    - Status transitions and acknowledgement (StatusActionsMixin)
    - Kitchen-facing lookups and history (QueryActionsMixin)

    Every response uses the `{"success": ..., "message": ...}` envelope.
    """

    serializer_class = OrderSerializer
    pagination_class = OrderPagination
    filterset_class = OrderFilter

    # Kitchen screens read orders and acknowledge changes; everything else is admin only.
    KITCHEN_ACTIONS = {
        "retrieve",
        "current",
        "by_tables",
        "by_combined_tables",
        "by_exact_tables",
        "history",
        "acknowledge",
    }

    def get_queryset(self):
        return OrderQueryService.base_queryset()

    def get_permissions(self):
        if self.action in self.KITCHEN_ACTIONS:
            return [IsAdminOrKitchen()]
        return [IsAdmin()]

    def get_lifecycle_service(self) -> OrderLifecycleService:
        return OrderLifecycleService()

    def actor(self, request: Request) -> str:
        return actor_id_for(request.user)

    def run_lifecycle(self, operation, success_status=status.HTTP_200_OK):
        """Call a lifecycle operation and wrap its result in the response envelope."""
        try:
            result = operation(self.get_lifecycle_service())
        except OrderError as e:
            logger.warning(f"Order request rejected ({e.code}): {e.message}")
            return service_error_response(e)

        body = {"success": True, "message": result.message}
        if self.action != "destroy":
            body["order"] = OrderSerializer(OrderQueryService.get_order(result.order.pk)).data
        if result.changes is not None:
            body["changes"] = result.changes
        return Response(body, status=success_status)

    def list(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset()).order_by("-created_at")
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(OrderSerializer(page, many=True).data)
        return Response({"success": True, "orders": OrderSerializer(queryset, many=True).data})

    def retrieve(self, request: Request, pk=None) -> Response:
        try:
            order = OrderQueryService.get_order(pk)
        except OrderError as e:
            return service_error_response(e)
        return Response({"success": True, "order": OrderSerializer(order).data})

    def create(self, request: Request) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        actor = self.actor(request)
        return self.run_lifecycle(
            lambda service: service.create_order(
                data.get("menu_items") or [],
                table_number=data.get("table_number"),
                actor=actor,
            ),
            success_status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        serializer = OrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        actor = self.actor(request)
        return self.run_lifecycle(
            lambda service: service.update_order(
                pk,
                actor=actor,
                menu_items=data["menu_items"] if "menu_items" in data else UNSET,
                table_number=data["table_number"] if "table_number" in data else UNSET,
                status=data.get("status"),
                expected_version=data.get("expected_version"),
            )
        )

    def partial_update(self, request: Request, pk=None) -> Response:
        return self.update(request, pk=pk)

    def destroy(self, request: Request, pk=None) -> Response:
        actor = self.actor(request)
        return self.run_lifecycle(lambda service: service.delete_order(pk, actor=actor))
