"""
Custom pagination classes for the API.
"""

from django.conf import settings
from rest_framework.pagination import LimitOffsetPagination, PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination class that allows page_size to be set via query parameter.

    Default is 50, max is 1000.
    """
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 1000


class SearchResultsPagination(LimitOffsetPagination):
    """
    limit/offset paging for category search.

    Defaults come from CATEGORY_ENGINE; the window itself is applied by the
    search query, so this class only parses parameters and shapes the response.
    """

    @property
    def default_limit(self):
        return settings.CATEGORY_ENGINE['SEARCH_DEFAULT_LIMIT']

    @property
    def max_limit(self):
        return settings.CATEGORY_ENGINE['SEARCH_MAX_LIMIT']

    def get_window(self, request):
        self.request = request
        self.limit = self.get_limit(request)
        self.offset = self.get_offset(request)
        return self.limit, self.offset

    def get_paginated_response(self, data):
        return Response({
            'limit': self.limit,
            'offset': self.offset,
            'results': data,
        })
