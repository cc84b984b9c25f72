from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.db.models import Count
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.context import Operator
from authentication.permissions import IsCafeStaff
from . import ledger, services
from .models import Order
from .serializers import (
    OrderWriteSerializer, OrderReadSerializer, OrderListSerializer,
    StatusUpdateSerializer, PaymentSerializer, PaymentCreateSerializer,
)


ORDER_RESULT_SCHEMA = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'success': openapi.Schema(type=openapi.TYPE_BOOLEAN),
        'message': openapi.Schema(type=openapi.TYPE_STRING),
        'order_id': openapi.Schema(type=openapi.TYPE_INTEGER),
        'total': openapi.Schema(type=openapi.TYPE_NUMBER),
        'status': openapi.Schema(type=openapi.TYPE_STRING),
    }
)


class OrderListView(generics.ListAPIView):
    """List orders newest first, with the number of items in each"""
    serializer_class = OrderListSerializer
    permission_classes = [IsCafeStaff]
    filterset_fields = ['status']

    def get_queryset(self):
        return Order.objects.annotate(item_count=Count('items')).order_by('-created_at')

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by order status", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderCreateView(generics.GenericAPIView):
    """Create a new order"""
    serializer_class = OrderWriteSerializer
    permission_classes = [IsCafeStaff]

    @swagger_auto_schema(
        operation_description="Create a new order with items. The total is computed by the server.",
        request_body=OrderWriteSerializer,
        responses={
            201: ORDER_RESULT_SCHEMA,
            400: 'Validation error',
            422: 'Product missing or inactive',
        }
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.create_order(
            customer_name=serializer.validated_data['customer_name'],
            phone=serializer.validated_data.get('phone'),
            items=serializer.line_items(),
            operator=Operator.from_request(request),
        )
        return Response({
            'success': True,
            'message': f'Order #{result.order_id} created',
            'order_id': result.order_id,
            'total': result.total,
            'status': result.status,
        }, status=status.HTTP_201_CREATED)


class OrderDetailView(generics.RetrieveAPIView):
    """
    get: Order with its items
    put: Replace customer details, status and the full item set
    delete: Delete an order that is not completed
    """
    serializer_class = OrderReadSerializer
    permission_classes = [IsCafeStaff]

    def get_queryset(self):
        return Order.objects.select_related('created_by').prefetch_related('items__product')

    @swagger_auto_schema(
        operation_description="Replace an order. Items are deleted and re-inserted as one unit.",
        request_body=OrderWriteSerializer,
        responses={
            200: ORDER_RESULT_SCHEMA,
            404: 'Order not found',
            409: 'Order is completed or the status change is not allowed',
        }
    )
    def put(self, request, pk):
        serializer = OrderWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = services.update_order(
            order_id=pk,
            customer_name=serializer.validated_data['customer_name'],
            phone=serializer.validated_data.get('phone'),
            status=serializer.validated_data.get('status'),
            items=serializer.line_items(),
            operator=Operator.from_request(request),
        )
        return Response({
            'success': True,
            'message': f'Order #{result.order_id} updated',
            'order_id': result.order_id,
            'total': result.total,
            'status': result.status,
        })

    @swagger_auto_schema(
        responses={
            200: 'Order deleted',
            404: 'Order not found',
            409: 'Completed orders cannot be deleted',
        }
    )
    def delete(self, request, pk):
        result = services.delete_order(pk, operator=Operator.from_request(request))
        return Response({
            'success': True,
            'message': f'Order #{result.order_id} deleted',
            'order_id': result.order_id,
        })


@swagger_auto_schema(
    method='post',
    operation_description="Move an order along pending -> processing -> done, or cancel it",
    request_body=StatusUpdateSerializer,
    responses={
        200: openapi.Response(description="Status updated"),
        400: openapi.Response(description="Unrecognised status"),
        404: openapi.Response(description="Order not found"),
        409: openapi.Response(description="Transition not allowed"),
    }
)
@api_view(['POST'])
@permission_classes([IsCafeStaff])
def update_order_status(request, order_id):
    serializer = StatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = services.update_order_status(
        order_id,
        serializer.validated_data['status'],
        operator=Operator.from_request(request),
    )
    return Response({
        'success': True,
        'message': f'Order #{result.order_id} is {result.status}',
        'order_id': result.order_id,
        'previous': result.previous,
        'status': result.status,
        'changed': result.changed,
    })


@swagger_auto_schema(
    method='post',
    operation_description="Record the payment for an order (one per order)",
    request_body=PaymentCreateSerializer,
    responses={201: PaymentSerializer, 404: 'Order not found', 409: 'Order already paid'}
)
@api_view(['POST'])
@permission_classes([IsCafeStaff])
def record_order_payment(request, order_id):
    serializer = PaymentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    payment = ledger.record_payment(
        order_id,
        serializer.validated_data['amount'],
        payment_method=serializer.validated_data['payment_method'],
        operator=Operator.from_request(request),
    )
    return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
