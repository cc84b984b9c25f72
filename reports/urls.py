from django.urls import path

from . import views

app_name = 'reports'

urlpatterns = [
    path('', views.sales_report, name='sales-report'),
    path('summary/', views.report_summary, name='report-summary'),
    path('top-products/', views.top_products, name='top-products'),
    path('export/', views.export_report, name='export-report'),
]
