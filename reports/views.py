import logging

from django.http import HttpResponse
from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from authentication.permissions import IsCafeStaff
from . import services
from .exports import SUPPORTED_FORMATS, export_filename, render_csv
from .periods import DEFAULT_PERIOD, resolve_period
from .serializers import (
    SalesReportSerializer, DashboardSummarySerializer, ProductSalesSerializer,
)

logger = logging.getLogger(__name__)

PERIOD_PARAM = openapi.Parameter(
    'period', openapi.IN_QUERY,
    description="today, week, month or year (anything else means today)",
    type=openapi.TYPE_STRING, default=DEFAULT_PERIOD,
)


def _parse_limit(raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


@swagger_auto_schema(
    method='get',
    operation_description="Revenue report with growth against the previous period, chart series and table",
    manual_parameters=[PERIOD_PARAM],
    responses={200: SalesReportSerializer},
)
@api_view(['GET'])
@permission_classes([IsCafeStaff])
def sales_report(request):
    report = services.build_report(request.query_params.get('period', DEFAULT_PERIOD))
    return Response(SalesReportSerializer(report).data)


@swagger_auto_schema(
    method='get',
    operation_description="Order counts by status and collected payments for the period",
    manual_parameters=[PERIOD_PARAM],
    responses={200: DashboardSummarySerializer},
)
@api_view(['GET'])
@permission_classes([IsCafeStaff])
def report_summary(request):
    summary = services.build_summary(request.query_params.get('period', DEFAULT_PERIOD))
    return Response(DashboardSummarySerializer(summary).data)


@swagger_auto_schema(
    method='get',
    operation_description="Best selling products by revenue",
    manual_parameters=[
        PERIOD_PARAM,
        openapi.Parameter('limit', openapi.IN_QUERY, description="Maximum rows (1-100)", type=openapi.TYPE_INTEGER),
    ],
    responses={200: 'Resolved period and ranked products'},
)
@api_view(['GET'])
@permission_classes([IsCafeStaff])
def top_products(request):
    window = resolve_period(request.query_params.get('period', DEFAULT_PERIOD))
    products = services.top_products(window.current, _parse_limit(request.query_params.get('limit')))
    return Response({
        'period': window.period,
        'products': ProductSalesSerializer(products, many=True).data,
    })


@swagger_auto_schema(
    method='get',
    operation_description="Download the report table as CSV",
    manual_parameters=[
        PERIOD_PARAM,
        openapi.Parameter('format', openapi.IN_QUERY, description="Export format", type=openapi.TYPE_STRING, default='csv'),
    ],
    responses={200: 'CSV file', 400: 'Unsupported format'},
)
@api_view(['GET'])
@permission_classes([IsCafeStaff])
def export_report(request):
    export_format = request.query_params.get('format', 'csv').lower()
    if export_format not in SUPPORTED_FORMATS:
        return Response({
            'error': True,
            'code': 'validation_failed',
            'message': f'Unsupported export format: {export_format}',
            'details': {'supported': list(SUPPORTED_FORMATS)},
            'status_code': status.HTTP_400_BAD_REQUEST,
        }, status=status.HTTP_400_BAD_REQUEST)

    window = resolve_period(request.query_params.get('period', DEFAULT_PERIOD))
    rows = services.table_rows(window.current, window.period)

    response = HttpResponse(render_csv(rows), content_type='text/csv; charset=utf-8')
    filename = export_filename(window.period, timezone.localdate())
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    logger.info("Exported %s report with %s rows", window.period, len(rows))
    return response
