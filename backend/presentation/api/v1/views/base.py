"""
Base Views.

Common view mixins and base classes.
"""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from ..serializers.base import HistoryRecordSerializer


class HistoryViewMixin:
    """
    Mixin for accessing object history.

    Subclasses set `history_model` to a model registered with
    django-simple-history and implement `check_history_access(pk)`.
    """

    history_model = None
    history_limit = 50

    def check_history_access(self, pk):
        """Raise if the object behind `pk` may not be inspected."""

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Get object history, newest first."""
        if self.history_model is None or not hasattr(self.history_model, 'history'):
            return Response(
                {'error': 'History is not available for this object'},
                status=status.HTTP_400_BAD_REQUEST
            )

        self.check_history_access(pk)
        records = self.history_model.history.filter(id=pk).select_related('history_user')
        serializer = HistoryRecordSerializer(records[:self.history_limit], many=True)
        return Response(serializer.data)


class ServicePaginationMixin:
    """
    Page plain lists returned by application services with the view's
    `pagination_class`.
    """

    pagination_class = None

    def paginate_list(self, request, items, serializer_class, **serializer_kwargs):
        if self.pagination_class is None:
            return Response(serializer_class(items, many=True, **serializer_kwargs).data)
        paginator = self.pagination_class()
        page = paginator.paginate_queryset(items, request, view=self)
        data = serializer_class(page, many=True, **serializer_kwargs).data
        return paginator.get_paginated_response(data)
