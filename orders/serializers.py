import re

from rest_framework import serializers

from cart.cart import MAX_QUANTITY, MIN_QUANTITY
from .models import Order

PHONE_RE = re.compile(r'^[\d\-()+]{8,}$')


class LineItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    image = serializers.CharField(required=False, allow_blank=True, default='')
    quantity = serializers.IntegerField(min_value=MIN_QUANTITY, max_value=MAX_QUANTITY)
    addedAt = serializers.CharField(required=False, allow_blank=True)


class OrderSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=30)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    deliveryMethod = serializers.ChoiceField(choices=[m for m, _ in Order.DELIVERY_METHODS], default=Order.DELIVERY)
    items = LineItemSerializer(many=True, allow_empty=False)
    # Client figures are informational; totals are recomputed server side
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    deliveryFee = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    total = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)

    def validate_name(self, value):
        return value.strip()

    def validate_email(self, value):
        return value.strip().lower()

    def validate_phone(self, value):
        value = value.strip()
        if not PHONE_RE.match(value.replace(' ', '')):
            raise serializers.ValidationError("Please enter a valid phone number")
        return value

    def validate(self, attrs):
        address = (attrs.get('address') or '').strip()
        if attrs['deliveryMethod'] == Order.DELIVERY and not address:
            raise serializers.ValidationError(
                {'address': "Delivery address is required for delivery orders"}
            )
        attrs['address'] = address if attrs['deliveryMethod'] == Order.DELIVERY else 'Pickup'
        return attrs


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s for s, _ in Order.STATUS_CHOICES])
    message = serializers.CharField(required=False, allow_blank=True)
