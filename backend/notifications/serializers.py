from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import CallSession

User = get_user_model()


class CallParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields


class CallSessionSerializer(serializers.ModelSerializer):
    admin = CallParticipantSerializer(read_only=True)
    kitchen_staff = CallParticipantSerializer(read_only=True)

    class Meta:
        model = CallSession
        fields = ["id", "admin", "kitchen_staff", "start_time", "end_time", "duration", "status"]
        read_only_fields = fields


class StartCallSerializer(serializers.Serializer):
    kitchen_staff_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=User.Role.KITCHEN),
        required=False,
        allow_null=True,
        source="kitchen_staff",
    )


class EndCallSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[CallSession.Status.COMPLETED, CallSession.Status.MISSED],
        required=False,
    )
