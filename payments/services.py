import logging

from landycakes.backend import BackendError

from .models import RemotePaymentStatus
from .serializers import CheckoutRequestSerializer, CheckoutResponseSerializer, PaymentStatusSerializer

logger = logging.getLogger(__name__)


def initiate_checkout(client, lines, guest_name, guest_email, phone):
    """
    Create the order and trigger the M-Pesa prompt on the buyer's phone.

    Returns the validated response (order_id, checkout_request_id, message).
    Raises BackendError on any failure, including a malformed response.
    """
    body = CheckoutRequestSerializer({
        'items': list(lines),
        'phone': phone,
        'guest_name': guest_name,
        'guest_email': guest_email,
    }).data
    data = client.post('/checkout', json=body)

    serializer = CheckoutResponseSerializer(data=data)
    if not serializer.is_valid():
        logger.error("Checkout response without order id: %s", data)
        raise BackendError('Failed to initiate payment', payload=data)
    logger.info("Order %s created, checkout request %s",
                serializer.validated_data['order_id'],
                serializer.validated_data.get('checkout_request_id'))
    return serializer.validated_data


def fetch_payment_status(client, order_id):
    data = client.get(f'/mpesa/status/{order_id}')
    serializer = PaymentStatusSerializer(data=data if isinstance(data, dict) else {})
    if not serializer.is_valid():
        return RemotePaymentStatus.PENDING
    return RemotePaymentStatus.parse(serializer.validated_data.get('payment_status'))


def fetch_orders(client):
    return client.get('/orders')
