from django.db import models
from decimal import Decimal

DEFAULT_LOGO_URL = '/default-tailor-logo.svg'
DEFAULT_INVOICE_PREFIX = 'KT'


class BillingSettings(models.Model):
    """Invoice branding and tax configuration for the shop (single row)"""
    shop_name = models.CharField(max_length=200, default='Karanjkar Tailors')
    shop_address = models.TextField(blank=True, default='Your Shop Address')
    shop_phone = models.CharField(max_length=30, blank=True, default='+91 00000 00000')
    shop_gstin = models.CharField(max_length=20, blank=True, default='')
    invoice_prefix = models.CharField(max_length=20, blank=True, default=DEFAULT_INVOICE_PREFIX)
    # Exactly one logo source is kept; setting one clears the other
    logo_url = models.CharField(max_length=500, blank=True, default=DEFAULT_LOGO_URL)
    logo_data_url = models.TextField(blank=True, default='')
    apply_tax = models.BooleanField(default=True)
    tax_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('5.00'))
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Billing settings ({self.shop_name})"

    @classmethod
    def load(cls):
        """Fetch the shop's settings row, creating it with defaults on first use"""
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj

    class Meta:
        db_table = 'billing_settings'
        verbose_name_plural = 'billing settings'
