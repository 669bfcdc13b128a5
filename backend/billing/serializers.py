from rest_framework import serializers
from decimal import Decimal
from .models import BillingSettings


class BillingSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillingSettings
        fields = [
            'shop_name', 'shop_address', 'shop_phone', 'shop_gstin', 'invoice_prefix',
            'logo_url', 'logo_data_url', 'apply_tax', 'tax_percent', 'updated_at'
        ]
        read_only_fields = ['updated_at']
        extra_kwargs = {
            'tax_percent': {'min_value': Decimal('0'), 'max_value': Decimal('100')},
        }

    def validate_invoice_prefix(self, value):
        return value.strip().upper()

    def validate_logo_data_url(self, value):
        if value and not value.startswith('data:image/'):
            raise serializers.ValidationError('logo_data_url must be an image data URL')
        return value

    def validate(self, attrs):
        logo_url = attrs.get('logo_url')
        logo_data_url = attrs.get('logo_data_url')
        if logo_url and logo_data_url:
            raise serializers.ValidationError({'logo_url': 'Provide either logo_url or logo_data_url, not both'})
        if logo_data_url:
            attrs['logo_url'] = ''
        elif logo_url:
            attrs['logo_data_url'] = ''
        return attrs
