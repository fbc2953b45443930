from rest_framework.pagination import BasePagination
from rest_framework.response import Response

MAX_PAGE_SIZE = 100
# largest OFFSET a 64-bit signed column type accepts, with room for LIMIT
MAX_OFFSET = 2 ** 63 - 1 - MAX_PAGE_SIZE


def parse_positive(raw, default, upper=None):
    """``raw`` as an int in [1, upper], or ``default`` for anything else."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1 or (upper is not None and value > upper):
        return default
    return value


class CustomPaginator(BasePagination):
    """
    Offset pagination driven by ``page`` (1-indexed) and ``pageSize``.

    Out of range or non-numeric values fall back to the defaults instead of
    erroring; a page past the end is simply empty.
    """
    page_size = 10
    max_page_size = MAX_PAGE_SIZE
    page_query_param = 'page'
    page_size_query_param = 'pageSize'

    def paginate_queryset(self, queryset, request, view=None):
        self.page = parse_positive(request.query_params.get(self.page_query_param), 1)
        self.current_page_size = parse_positive(
            request.query_params.get(self.page_size_query_param),
            self.page_size,
            upper=self.max_page_size,
        )
        if (self.page - 1) * self.current_page_size > MAX_OFFSET:
            self.page = 1
        self.total = queryset.count()
        offset = (self.page - 1) * self.current_page_size
        return list(queryset[offset:offset + self.current_page_size])

    def get_paginated_response(self, data):
        return Response({
            'items': data,
            'total': self.total,
            'page': self.page,
            'pageSize': self.current_page_size,
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'items': schema,
                'total': {'type': 'integer'},
                'page': {'type': 'integer'},
                'pageSize': {'type': 'integer'},
            },
        }


class TaskPaginator(CustomPaginator):
    page_size = 10


class ActivityPaginator(CustomPaginator):
    page_size = 20


class ActivityFeedPaginator(CustomPaginator):
    page_size = 50
