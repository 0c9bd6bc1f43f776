import json
import logging

from django.http import JsonResponse
from django.urls import reverse
from django.views.decorators.http import require_http_methods

from cart.utils.cart_utils import cart_summary
from landycakes.backend import BackendClient, BackendError

from .checkout import MSG_IN_PROGRESS, CheckoutController
from .models import CheckoutPolicy, CheckoutSession, PaymentStatus
from .services import fetch_orders

logger = logging.getLogger(__name__)

CHECKOUT_SESSION_KEY = 'checkout'


def _load_checkout(request):
    data = request.session.get(CHECKOUT_SESSION_KEY)
    if not data:
        return None
    try:
        return CheckoutSession.from_dict(data)
    except (ValueError, TypeError, AttributeError):
        logger.warning("Dropping unreadable checkout record")
        request.session.pop(CHECKOUT_SESSION_KEY, None)
        return None


def _save_checkout(request, checkout):
    request.session[CHECKOUT_SESSION_KEY] = checkout.to_dict()


def _controller(request, checkout=None):
    return CheckoutController(
        BackendClient.for_request(request),
        request.cart,
        policy=CheckoutPolicy.from_settings(),
        session=checkout,
    )


def _form_data(request):
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        # camelCase field names are accepted too
        return {
            'guest_name': data.get('guest_name', data.get('guestName')),
            'guest_email': data.get('guest_email', data.get('guestEmail')),
            'phone': data.get('phone'),
        }
    return request.POST


@require_http_methods(["GET", "POST"])
def checkout(request):
    """GET: order summary. POST: validate, create the order and send the M-Pesa prompt."""
    if request.method == 'GET':
        checkout = _load_checkout(request)
        policy = CheckoutPolicy.from_settings()
        return JsonResponse({
            'success': True,
            'cart': cart_summary(request.cart),
            'checkout': checkout.to_dict() if checkout else None,
            'phoneExample': policy.phone_example,
        })

    controller = _controller(request, _load_checkout(request))
    if controller.status is PaymentStatus.PROCESSING and controller.timed_out():
        controller.session = CheckoutSession()

    session = controller.submit(_form_data(request))

    if session.payment_status is PaymentStatus.PROCESSING and not session.error:
        _save_checkout(request, session)
        return JsonResponse({'success': True, **session.to_dict()})

    if session.error == MSG_IN_PROGRESS:
        status = 409
    elif session.payment_status is PaymentStatus.FAILED:
        status = 502
    else:
        status = 400
    return JsonResponse({**session.to_dict(), 'success': False, 'message': session.error}, status=status)


@require_http_methods(["GET"])
def payment_status(request, order_id):
    """One poll of the payment; the checkout page calls this on an interval."""
    checkout = _load_checkout(request)
    if checkout is None or checkout.order_id != str(order_id):
        return JsonResponse({'success': False, 'message': 'No payment in progress for this order'}, status=404)

    controller = _controller(request, checkout)
    controller.tick()
    _save_checkout(request, controller.session)

    data = {'success': True, **controller.session.to_dict()}
    if controller.status is PaymentStatus.SUCCESS:
        data['redirectUrl'] = reverse('order-history')
        data['redirectAfter'] = controller.policy.redirect_delay
    return JsonResponse(data)


@require_http_methods(["POST"])
def cancel_checkout(request):
    """Stop watching the current payment (the buyer left the checkout page)."""
    checkout = request.session.pop(CHECKOUT_SESSION_KEY, None)
    return JsonResponse({'success': True, 'cancelled': bool(checkout)})


@require_http_methods(["GET"])
def order_history(request):
    try:
        orders = fetch_orders(BackendClient.for_request(request))
    except BackendError as exc:
        return JsonResponse({'success': False, 'message': exc.message}, status=exc.status_code or 502)
    return JsonResponse({'success': True, 'orders': orders})
