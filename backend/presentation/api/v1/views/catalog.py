"""
Catalog Views.

API views for the category tree. All reads and writes go through the
CategoryService assembled at application startup.
"""

from django.apps import apps
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.persistence.models import Category as CategoryModel
from ...pagination import SearchResultsPagination, StandardResultsSetPagination
from ..serializers.catalog import (
    CategoryCreateSerializer,
    CategoryCustomFieldsSerializer,
    CategoryDetailSerializer,
    CategoryMoveSerializer,
    CategorySearchSerializer,
    CategorySerializer,
    CategoryTreeSerializer,
    CategoryUpdateSerializer,
)
from .base import HistoryViewMixin, ServicePaginationMixin


LIST_FILTERS = ('is_public', 'created_by', 'parent')


class CategoryViewSet(HistoryViewMixin, ServicePaginationMixin, viewsets.ViewSet):
    """
    ViewSet for the category hierarchy.

    Endpoints:
    - GET /categories/ - list categories (filters: is_public, created_by, parent)
    - POST /categories/ - create category
    - GET /categories/{id}/ - category with counts and custom fields
    - PATCH /categories/{id}/ - update name, description, visibility
    - DELETE /categories/{id}/ - soft delete a leaf category
    - POST /categories/{id}/move/ - move category with its subtree
    - GET /categories/{id}/children/ - direct children
    - GET /categories/{id}/descendants/ - whole subtree
    - GET /categories/{id}/breadcrumbs/ - root-first ancestors
    - GET/PUT /categories/{id}/custom-fields/ - custom field values
    - GET /categories/{id}/history/ - change history
    - GET /categories/search/ - name search (q, limit, offset)
    - GET /categories/tree/ - nested tree
    """

    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    history_model = CategoryModel

    @property
    def service(self):
        return apps.get_app_config('persistence').category_service

    def check_history_access(self, pk):
        self.service.get_category(pk)

    def _detail_response(self, category, status_code=status.HTTP_200_OK):
        counts = self.service.get_category_counts(category.id)
        serializer = CategoryDetailSerializer(category, context={'counts': counts})
        return Response(serializer.data, status=status_code)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def list(self, request):
        filters = {key: request.query_params.get(key) for key in LIST_FILTERS}
        categories = self.service.list_categories(filters)
        return self.paginate_list(request, categories, CategorySerializer)

    def create(self, request):
        serializer = CategoryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = self.service.create_category(
            created_by=request.user.id,
            **serializer.validated_data
        )
        return self._detail_response(category, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        category = self.service.get_category(pk, with_details=True)
        return self._detail_response(category)

    def partial_update(self, request, pk=None):
        serializer = CategoryUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.service.update_category(pk, dict(serializer.validated_data), request.user.id)
        return self._detail_response(self.service.get_category(pk, with_details=True))

    def destroy(self, request, pk=None):
        self.service.delete_category(pk, request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def move(self, request, pk=None):
        """Move the category under `parent_id` (null for root level)."""
        serializer = CategoryMoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = self.service.move_category(
            pk,
            serializer.validated_data['parent_id'],
            request.user.id
        )
        return Response(CategorySerializer(category).data)

    @action(detail=True, methods=['get'])
    def children(self, request, pk=None):
        self.service.get_category(pk)
        children = self.service.get_category_children(pk)
        return Response(CategorySerializer(children, many=True).data)

    @action(detail=True, methods=['get'])
    def descendants(self, request, pk=None):
        self.service.get_category(pk)
        descendants = self.service.get_category_descendants(pk)
        return Response(CategorySerializer(descendants, many=True).data)

    @action(detail=True, methods=['get'])
    def breadcrumbs(self, request, pk=None):
        crumbs = self.service.get_category_breadcrumbs(pk)
        return Response(CategorySerializer(crumbs, many=True).data)

    @action(detail=False, methods=['get'])
    def tree(self, request):
        roots = self.service.get_category_tree()
        return Response(CategoryTreeSerializer(roots, many=True).data)

    @action(detail=False, methods=['get'])
    def search(self, request):
        params = CategorySearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        filters = dict(params.validated_data)
        query = filters.pop('q')

        paginator = SearchResultsPagination()
        limit, offset = paginator.get_window(request)
        results = self.service.search_categories(query, filters, limit=limit, offset=offset)
        return paginator.get_paginated_response(CategorySerializer(results, many=True).data)

    # -------------------------------------------------------------------------
    # Custom fields
    # -------------------------------------------------------------------------

    @action(detail=True, methods=['get', 'put'], url_path='custom-fields')
    def custom_fields(self, request, pk=None):
        if request.method == 'GET':
            fields = self.service.get_category_custom_fields(pk)
            return Response({'custom_fields': fields})

        serializer = CategoryCustomFieldsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields = self.service.update_category_custom_fields(
            pk,
            serializer.validated_data['custom_fields'],
            request.user.id
        )
        return Response({'custom_fields': fields})
