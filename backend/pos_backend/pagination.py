from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """`?page=` / `?limit=` pagination with the envelope the POS clients expect."""

    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 200
    results_key = "results"

    def get_page_size(self, request):
        size = super().get_page_size(request)
        return size or getattr(settings, "ORDER_SETTINGS", {}).get("DEFAULT_PAGE_SIZE", 20)

    def get_paginated_response(self, data):
        return Response(
            {
                "success": True,
                "count": len(data),
                "total": self.page.paginator.count,
                "page": self.page.number,
                "total_pages": self.page.paginator.num_pages,
                self.results_key: data,
            }
        )
