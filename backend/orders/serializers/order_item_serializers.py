from rest_framework import serializers

from orders.models import OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    """Read-only view of a priced line snapshot."""

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderLine
        fields = [
            "menu_item_id",
            "name",
            "unit_price",
            "category",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields


class OrderLineRequestSerializer(serializers.Serializer):
    """
    One requested line. Quantity is only type-checked here; the pricing service
    decides whether it is usable so that unknown menu items are reported first.
    """

    menu_item_id = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(required=False, allow_null=True)
