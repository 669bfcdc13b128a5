from django.urls import path
from .views import (
    order_list_create, order_detail,
    measurement_list_create, measurement_detail
)

urlpatterns = [
    # Order endpoints
    path('orders', order_list_create, name='order-list-create'),
    path('orders/<int:pk>', order_detail, name='order-detail'),

    # Measurement endpoints
    path('measurements', measurement_list_create, name='measurement-list-create'),
    path('measurements/<int:pk>', measurement_detail, name='measurement-detail'),
]
