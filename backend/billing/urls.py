from django.urls import path
from .views import billing_settings, billing_summary, invoice_detail, invoice_batch

urlpatterns = [
    path('billing/settings', billing_settings, name='billing-settings'),
    path('billing/summary', billing_summary, name='billing-summary'),
    path('billing/invoices', invoice_batch, name='billing-invoice-batch'),
    path('billing/invoices/<int:order_id>', invoice_detail, name='billing-invoice-detail'),
]
