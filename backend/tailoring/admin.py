from django.contrib import admin
from .models import Order, Measurement


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer', 'dress_type', 'price', 'paid_amount', 'status', 'delivery_date', 'created_at']
    list_filter = ['status', 'payment_mode', 'delivery_date', 'created_at']
    search_fields = ['customer__name', 'customer__phone', 'dress_type']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-id']
    date_hierarchy = 'created_at'


@admin.register(Measurement)
class MeasurementAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer', 'chest', 'waist', 'shoulder', 'length', 'created_at']
    search_fields = ['customer__name', 'customer__phone']
    ordering = ['-id']
