from django.db import models
from decimal import Decimal
from backend.parties.models import Customer

DELIVERED_STATUS = 'Delivered'


def is_delivered(status):
    """Case-insensitive delivered check shared by billing and dashboard rollups"""
    return str(status or '').strip().lower() == DELIVERED_STATUS.lower()


def compute_due_amount(price, paid_amount):
    """Outstanding balance, floored at zero"""
    due = Decimal(str(price or 0)) - Decimal(str(paid_amount or 0))
    return max(due, Decimal('0.00'))


class Order(models.Model):
    """Garment orders"""
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='orders')
    dress_type = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    trial_date = models.DateField(null=True, blank=True)
    delivery_date = models.DateField()
    # Free text: Pending, In Progress, Trial, Ready, Delivered, Cancelled or Other by convention
    status = models.CharField(max_length=30, default='Pending')
    payment_mode = models.CharField(max_length=30, null=True, blank=True)
    payment_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order #{self.id} - {self.dress_type}"

    @property
    def due_amount(self):
        return compute_due_amount(self.price, self.paid_amount)

    class Meta:
        db_table = 'orders'
        ordering = ['-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=0) & models.Q(paid_amount__lte=models.F('price')),
                name='order_paid_amount_within_price',
            ),
        ]


class Measurement(models.Model):
    """Body measurements taken for a customer"""
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='measurements')
    chest = models.DecimalField(max_digits=6, decimal_places=2)
    waist = models.DecimalField(max_digits=6, decimal_places=2)
    shoulder = models.DecimalField(max_digits=6, decimal_places=2)
    length = models.DecimalField(max_digits=6, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Measurement #{self.id} for {self.customer}"

    class Meta:
        db_table = 'measurements'
        ordering = ['-id']
