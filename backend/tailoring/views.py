from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .models import Order, Measurement
from .serializers import OrderSerializer, MeasurementSerializer


def filter_by_customer(queryset, request):
    """Apply the optional ?customer_id= filter"""
    customer_id = request.query_params.get('customer_id', None)
    if customer_id:
        if not str(customer_id).isdigit():
            raise ValidationError({'customer_id': 'customer_id must be a number'})
        queryset = queryset.filter(customer_id=int(customer_id))
    return queryset


# Order views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def order_list_create(request):
    """List orders (newest first, optionally for one customer) or create an order"""
    if request.method == 'GET':
        queryset = filter_by_customer(Order.objects.select_related('customer').order_by('-id'), request)
        serializer = OrderSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = OrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def order_detail(request, pk):
    """Retrieve, update or delete an order"""
    order = get_object_or_404(Order.objects.select_related('customer'), pk=pk)

    if request.method == 'GET':
        serializer = OrderSerializer(order)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = OrderSerializer(order, data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
    else:  # DELETE
        order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Measurement views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def measurement_list_create(request):
    """List measurements (newest first, optionally for one customer) or record new ones"""
    if request.method == 'GET':
        queryset = filter_by_customer(Measurement.objects.select_related('customer').order_by('-id'), request)
        serializer = MeasurementSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = MeasurementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def measurement_detail(request, pk):
    """Retrieve, update or delete a measurement"""
    measurement = get_object_or_404(Measurement.objects.select_related('customer'), pk=pk)

    if request.method == 'GET':
        serializer = MeasurementSerializer(measurement)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MeasurementSerializer(measurement, data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
    else:  # DELETE
        measurement.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
