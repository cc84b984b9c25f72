import logging

from rest_framework import generics
from rest_framework import filters
from django_filters.rest_framework import DjangoFilterBackend

from authentication.permissions import IsCafeStaff
from .models import Product
from .serializers import ProductSerializer

logger = logging.getLogger(__name__)


class ProductListView(generics.ListAPIView):
    """
    get: List catalog products, filterable by active flag and category
    """
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsCafeStaff]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_active', 'category']
    search_fields = ['name']
    ordering_fields = ['name', 'price', 'created_at']
    ordering = ['name']


class ProductDetailView(generics.RetrieveDestroyAPIView):
    """
    get: Get product details
    delete: Delete a product. Products referenced by past orders are protected
    and the request fails with 409.
    """
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsCafeStaff]

    def perform_destroy(self, instance):
        # ProtectedError from OrderItem.product propagates to the exception handler
        product_id = instance.pk
        instance.delete()
        logger.info("Product %s deleted", product_id)
