import math

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    """
    ?page=<n>&limit=<m>; limit is clamped to [1, API_MAX_PAGE_SIZE].
    """
    page_query_param = "page"
    page_size_query_param = "limit"

    @property
    def max_page_size(self):
        return getattr(settings, "API_MAX_PAGE_SIZE", 50)

    def get_page_size(self, request):
        raw = request.query_params.get(self.page_size_query_param)
        if raw is None:
            return self.page_size
        try:
            size = int(raw)
        except (TypeError, ValueError):
            return self.page_size
        return min(self.max_page_size, max(1, size))

    def get_paginated_response(self, data):
        page = self.page.number
        total = self.page.paginator.count
        limit = self.page.paginator.per_page
        pages = math.ceil(total / limit) if limit else 0
        return Response({
            "success": True,
            "data": data,
            "pagination": {
                "page": page,
                "limit": limit,
                "totalCount": total,
                "totalPages": pages,
                "nextPage": page + 1 if self.page.has_next() else None,
                "previousPage": page - 1 if self.page.has_previous() else None,
            },
        })

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": schema,
                "pagination": {"type": "object"},
            },
        }
