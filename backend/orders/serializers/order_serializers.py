from rest_framework import serializers

from orders.models import Order, OrderUpdateHistory

from .order_item_serializers import OrderLineRequestSerializer, OrderLineSerializer


class OrderSerializer(serializers.ModelSerializer):
    lines = OrderLineSerializer(many=True, read_only=True)
    table_display_text = serializers.CharField(read_only=True)
    has_pending_changes = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "status",
            "lines",
            "total_price",
            "table_numbers",
            "table_display_text",
            "created_by",
            "created_at",
            "updated_at",
            "last_updated_at",
            "completed_at",
            "completed_by",
            "cancelled_at",
            "cancelled_by",
            "cancellation_reason",
            "added_items",
            "removed_items",
            "updated_items",
            "has_pending_changes",
            "expires_at",
            "version",
        ]
        read_only_fields = fields


class OrderUpdateHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderUpdateHistory
        fields = ["updated_at", "updated_by", "changes"]
        read_only_fields = fields


class OrderHistorySerializer(serializers.ModelSerializer):
    """An order's audit trail together with just enough context to show it."""

    table_display_text = serializers.CharField(read_only=True)
    update_history = OrderUpdateHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "table_numbers",
            "table_display_text",
            "status",
            "created_at",
            "update_history",
        ]
        read_only_fields = fields


# --- Request serializers ---

class OrderCreateSerializer(serializers.Serializer):
    menu_items = OrderLineRequestSerializer(many=True, required=False)
    # Accepts a number, a "4, 5" string or a list; normalized by the service.
    table_number = serializers.JSONField(required=False, allow_null=True)


class OrderUpdateSerializer(serializers.Serializer):
    """
    Partial update payload. Absent keys are left untouched, so views must check
    key presence in `validated_data` rather than truthiness.
    """

    menu_items = OrderLineRequestSerializer(many=True, required=False)
    table_number = serializers.JSONField(required=False, allow_null=True)
    # Free text on purpose: the service reports unknown values as InvalidStatus.
    status = serializers.CharField(required=False, allow_blank=True)
    expected_version = serializers.IntegerField(required=False, min_value=1)
