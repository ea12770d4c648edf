import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from pos_backend.exceptions import error_response
from users.permissions import IsAdmin

from .models import CallSession
from .serializers import CallSessionSerializer, EndCallSerializer, StartCallSerializer
from .services import CallLogService

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([IsAdmin])
def call_history(request):
    """Latest calls, newest first."""
    calls = CallLogService.history()
    return Response({"success": True, "calls": CallSessionSerializer(calls, many=True).data})


@api_view(["POST"])
@permission_classes([IsAdmin])
def start_call(request):
    serializer = StartCallSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    call = CallLogService.start_call(request.user, serializer.validated_data.get("kitchen_staff"))
    return Response(
        {"success": True, "call": CallSessionSerializer(call).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(["PUT", "POST"])
@permission_classes([IsAdmin])
def end_call(request, call_id):
    serializer = EndCallSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        call = CallLogService.end_call(call_id, serializer.validated_data.get("status"))
    except CallSession.DoesNotExist:
        return error_response("Call not found", status.HTTP_404_NOT_FOUND, code="call_not_found")
    return Response({"success": True, "call": CallSessionSerializer(call).data})
