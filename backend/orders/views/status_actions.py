from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import CancelOrderSerializer, CompleteOrderSerializer


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["post", "put"], url_path="complete")
    def complete(self, request: Request, pk=None) -> Response:
        """Completes the order and posts its total to today's revenue."""
        serializer = CompleteOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = self.actor(request)
        return self.run_lifecycle(
            lambda service: service.complete_order(
                pk,
                actor=actor,
                expected_version=serializer.validated_data.get("expected_version"),
            )
        )

    @action(detail=True, methods=["post", "put"], url_path="cancel")
    def cancel(self, request: Request, pk=None) -> Response:
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = self.actor(request)
        return self.run_lifecycle(
            lambda service: service.cancel_order(
                pk,
                actor=actor,
                reason=serializer.validated_data.get("reason"),
                expected_version=serializer.validated_data.get("expected_version"),
            )
        )

    @action(detail=True, methods=["post", "put"], url_path="acknowledge")
    def acknowledge(self, request: Request, pk=None) -> Response:
        """Kitchen has seen the latest changes; clears the change markers."""
        actor = self.actor(request)
        return self.run_lifecycle(lambda service: service.acknowledge_order(pk, actor=actor))
