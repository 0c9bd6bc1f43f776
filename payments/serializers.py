from rest_framework import serializers

from cart.serializers import CartLineItemSerializer


class CheckoutRequestSerializer(serializers.Serializer):
    """Body of POST /checkout."""
    items = CartLineItemSerializer(many=True)
    phone = serializers.CharField()
    guestName = serializers.CharField(source='guest_name')
    guestEmail = serializers.CharField(source='guest_email')


class CheckoutResponseSerializer(serializers.Serializer):
    orderId = serializers.CharField(source='order_id')
    checkoutRequestId = serializers.CharField(source='checkout_request_id', required=False, allow_null=True, allow_blank=True)
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PaymentStatusSerializer(serializers.Serializer):
    paymentStatus = serializers.CharField(source='payment_status', required=False, default='PENDING')
    orderStatus = serializers.CharField(source='order_status', required=False, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
