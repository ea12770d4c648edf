from rest_framework import serializers

from .models import DEFAULT_CATEGORY, MenuItem


class PriorityField(serializers.Field):
    """True only for `true`, `"true"`, `1` or `"1"`; anything else is False."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            return data.strip().lower() in ("true", "1")
        return data is True or (type(data) is int and data == 1)

    def to_representation(self, value):
        return bool(value)


class MenuItemSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    priority = PriorityField(required=False)

    class Meta:
        model = MenuItem
        fields = ["id", "name", "price", "category", "priority", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_category(self, value):
        return (value or "").strip() or DEFAULT_CATEGORY
