from django.contrib import admin
from .models import BillingSettings


@admin.register(BillingSettings)
class BillingSettingsAdmin(admin.ModelAdmin):
    list_display = ['shop_name', 'invoice_prefix', 'apply_tax', 'tax_percent', 'updated_at']
    readonly_fields = ['updated_at']
