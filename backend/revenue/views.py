import logging
from datetime import date

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from pos_backend.exceptions import error_response
from users.permissions import IsAdmin

from .services import RevenueReportService

logger = logging.getLogger(__name__)


def _parse_range(request):
    """Return (start, end, error_response) from `start_date`/`end_date` query params."""
    raw_start = request.query_params.get("start_date")
    raw_end = request.query_params.get("end_date")
    if not raw_start or not raw_end:
        return None, None, error_response(
            "start_date and end_date are required (YYYY-MM-DD)",
            status.HTTP_400_BAD_REQUEST,
            code="date_range_required",
        )
    try:
        start = date.fromisoformat(raw_start)
        end = date.fromisoformat(raw_end)
    except ValueError:
        return None, None, error_response(
            "Dates must use the YYYY-MM-DD format",
            status.HTTP_400_BAD_REQUEST,
            code="invalid_date",
        )
    if start > end:
        return None, None, error_response(
            "start_date must not be after end_date",
            status.HTTP_400_BAD_REQUEST,
            code="invalid_date_range",
        )
    return start, end, None


@api_view(["GET"])
@permission_classes([IsAdmin])
def revenue_today(request):
    return Response({"success": True, **RevenueReportService.today()})


@api_view(["GET"])
@permission_classes([IsAdmin])
def revenue_total(request):
    return Response({"success": True, **RevenueReportService.total()})


@api_view(["GET"])
@permission_classes([IsAdmin])
def revenue_range(request):
    start, end, error = _parse_range(request)
    if error:
        return error
    return Response({"success": True, **RevenueReportService.date_range(start, end)})


@api_view(["GET"])
@permission_classes([IsAdmin])
def revenue_stats(request):
    return Response({"success": True, "stats": RevenueReportService.stats()})


@api_view(["GET"])
@permission_classes([IsAdmin])
def revenue_by_category(request):
    start, end, error = _parse_range(request)
    if error:
        return error
    return Response(
        {
            "success": True,
            "start_date": start,
            "end_date": end,
            "categories": RevenueReportService.categories(start, end),
        }
    )
