from collections.abc import Mapping
from rest_framework import serializers
from decimal import Decimal
from backend.parties.models import Customer
from .models import Order, Measurement

CUSTOMER_ERROR_MESSAGES = {
    'required': 'customer_id is required',
    'null': 'customer_id is required',
    'does_not_exist': 'Invalid customer_id. Add customer first.',
    'incorrect_type': 'Invalid customer_id. Add customer first.',
}


class CustomerReferenceField(serializers.PrimaryKeyRelatedField):
    """customer_id input validated against the customers table"""

    def __init__(self, **kwargs):
        kwargs.setdefault('source', 'customer')
        kwargs.setdefault('queryset', Customer.objects.all())
        kwargs.setdefault('error_messages', CUSTOMER_ERROR_MESSAGES)
        super().__init__(**kwargs)


class OrderSerializer(serializers.ModelSerializer):
    customer_id = CustomerReferenceField()
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    customer_phone = serializers.CharField(source='customer.phone', read_only=True)
    due_amount = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    OPTIONAL_FIELDS = ('trial_date', 'payment_mode', 'payment_date')

    class Meta:
        model = Order
        fields = [
            'id', 'customer_id', 'customer_name', 'customer_phone', 'dress_type',
            'price', 'paid_amount', 'due_amount', 'trial_date', 'delivery_date',
            'status', 'payment_mode', 'payment_date', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'price': {'min_value': Decimal('0')},
            'paid_amount': {
                'min_value': Decimal('0'),
                'error_messages': {'min_value': 'paid_amount cannot be negative'},
            },
        }

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            return super().to_internal_value(data)
        # Blank optional values from HTML forms mean "not set"
        data = data.dict() if hasattr(data, 'dict') else dict(data)
        if not self.partial:
            # PUT replaces the record: omitted fields reset to their defaults
            for field in self.OPTIONAL_FIELDS:
                data.setdefault(field, None)
            data.setdefault('paid_amount', 0)
            data.setdefault('status', 'Pending')
        for field in self.OPTIONAL_FIELDS:
            if field in data and not str(data[field] or '').strip():
                data[field] = None
        if 'paid_amount' in data and data['paid_amount'] in (None, ''):
            data['paid_amount'] = 0
        if 'status' in data and not str(data['status'] or '').strip():
            data['status'] = 'Pending'
        return super().to_internal_value(data)

    def validate(self, attrs):
        price = attrs.get('price', getattr(self.instance, 'price', None))
        paid_amount = attrs.get('paid_amount', getattr(self.instance, 'paid_amount', Decimal('0.00')))
        if price is not None and paid_amount > price:
            raise serializers.ValidationError({'paid_amount': 'paid_amount cannot be greater than price'})
        return attrs


class MeasurementSerializer(serializers.ModelSerializer):
    customer_id = CustomerReferenceField()
    customer_name = serializers.CharField(source='customer.name', read_only=True)

    class Meta:
        model = Measurement
        fields = [
            'id', 'customer_id', 'customer_name', 'chest', 'waist', 'shoulder', 'length',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
