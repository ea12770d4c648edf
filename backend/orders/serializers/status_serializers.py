from rest_framework import serializers


class CompleteOrderSerializer(serializers.Serializer):
    expected_version = serializers.IntegerField(required=False, min_value=1)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    expected_version = serializers.IntegerField(required=False, min_value=1)
