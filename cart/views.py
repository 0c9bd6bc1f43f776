import json
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from .serializers import CartItemCandidateSerializer
from .utils.cart_utils import cart_summary

logger = logging.getLogger(__name__)


def _payload(request):
    """Accept either a JSON body or a regular form post."""
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            return None
        return data if isinstance(data, dict) else None
    return request.POST.dict()


def _cart_response(request, status=200, **extra):
    data = {'success': True, 'cart': cart_summary(request.cart)}
    data.update(extra)
    return JsonResponse(data, status=status)


@require_http_methods(["POST"])
def add_to_cart(request):
    data = _payload(request)
    if data is None:
        return JsonResponse({'success': False, 'message': 'Invalid request body'}, status=400)

    serializer = CartItemCandidateSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'success': False, 'message': 'Invalid product', 'errors': serializer.errors}, status=400)

    result = request.cart.add_to_cart(serializer.validated_data)
    if not result.success:
        logger.info("Rejected add of %s: cart belongs to %s", data.get('id'), request.cart.get_current_seller())
        return JsonResponse({
            'success': False,
            'message': result.message,
            'cart': cart_summary(request.cart),
        }, status=409)
    return _cart_response(request)


@require_http_methods(["POST"])
def update_cart(request, product_id):
    data = _payload(request)
    if data is None:
        return JsonResponse({'success': False, 'message': 'Invalid request body'}, status=400)
    try:
        quantity = int(data.get('quantity', 1))
    except (ValueError, TypeError):
        return JsonResponse({'success': False, 'message': 'Invalid quantity'}, status=400)

    request.cart.update_quantity(product_id, quantity)
    return _cart_response(request)


@require_http_methods(["POST"])
def remove_from_cart(request, product_id):
    request.cart.remove_from_cart(product_id)
    return _cart_response(request)


@require_http_methods(["POST"])
def move_to_wishlist(request, product_id):
    line = request.cart.move_to_wishlist(product_id)
    return _cart_response(request, moved=line.id if line else None)


@require_http_methods(["POST"])
def clear_cart(request):
    request.cart.clear_cart()
    return _cart_response(request)


@require_http_methods(["GET"])
def cart_summary_view(request):
    return _cart_response(request)
