from django.utils.functional import SimpleLazyObject

from .cart import CartStore


def get_cart(request):
    if not hasattr(request, '_cached_cart'):
        request._cached_cart = CartStore(request.session).load()
    return request._cached_cart


class CartMiddleware:
    """Expose the session cart as `request.cart`, loaded on first access."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.cart = SimpleLazyObject(lambda: get_cart(request))
        return self.get_response(request)
