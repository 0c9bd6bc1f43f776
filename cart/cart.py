"""
Persisted cart store.

The cart lives in durable per-browser storage (the Django session) under the
"cart" key, as a JSON array of line items. A cart only ever holds products
from one seller.
"""
import json
import logging
from dataclasses import dataclass, replace

from .serializers import CartLineItemSerializer

logger = logging.getLogger(__name__)

CART_SESSION_KEY = 'cart'


class CartNotReady(RuntimeError):
    """The store was used before its saved cart finished loading."""


@dataclass(frozen=True)
class CartLineItem:
    id: str
    name: str
    price: float
    seller: str
    quantity: int = 1
    image: str = ''
    original_price: float = None
    in_stock: bool = True
    free_shipping: bool = None

    @property
    def line_total(self):
        return self.price * self.quantity


@dataclass(frozen=True)
class CartResult:
    success: bool
    message: str = None


def seller_mismatch_message(current_seller, rejected_seller):
    return (
        'You can only add products from one seller at a time. '
        f'Your cart currently contains items from "{current_seller}". '
        'Please clear your cart or complete your current order before adding '
        f'items from "{rejected_seller}".'
    )


def dump_cart(lines):
    """Plain list of camelCase dicts, stored as-is inside the session."""
    return [dict(line) for line in CartLineItemSerializer(lines, many=True).data]


def parse_cart(raw):
    """Decode a stored cart. Raises ValueError when it cannot be trusted."""
    data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    if not isinstance(data, list):
        raise ValueError('stored cart is not a list')
    serializer = CartLineItemSerializer(data=data, many=True)
    if not serializer.is_valid():
        raise ValueError(f'invalid cart lines: {serializer.errors}')
    lines = [CartLineItem(**attrs) for attrs in serializer.validated_data]
    if len({line.seller for line in lines}) > 1:
        raise ValueError('stored cart mixes sellers')
    return lines


class CartStore:
    """
    Single source of truth for the buyer's in-progress cart.

    `storage` is any mapping with `get` and item assignment (a Django session
    in production). Nothing is read from or written to it before `load()`.
    """

    def __init__(self, storage, key=CART_SESSION_KEY):
        self.storage = storage
        self.key = key
        self._lines = []
        self._ready = False

    @property
    def ready(self):
        return self._ready

    def load(self):
        raw = self.storage.get(self.key)
        lines = []
        if raw:
            try:
                lines = parse_cart(raw)
            except (ValueError, TypeError) as exc:
                logger.warning("Discarding unreadable saved cart: %s", exc)
        self._lines = lines
        self._ready = True
        logger.debug("Cart loaded with %d line(s)", len(lines))
        return self

    def _check_ready(self):
        if not self._ready:
            raise CartNotReady('cart used before load() completed')

    def _save(self, lines):
        self._lines = lines
        self.storage[self.key] = dump_cart(lines)
        if hasattr(self.storage, 'modified'):
            self.storage.modified = True

    @property
    def items(self):
        self._check_ready()
        return tuple(self._lines)

    def get_line(self, product_id):
        self._check_ready()
        product_id = str(product_id)
        return next((line for line in self._lines if line.id == product_id), None)

    def add_to_cart(self, item):
        """
        Add one unit of `item` (a CartLineItem or a mapping of its fields).

        Returns CartResult(success=False, message) without touching the cart
        when the item belongs to another seller.
        """
        self._check_ready()
        if not isinstance(item, CartLineItem):
            item = CartLineItem(**{k: v for k, v in dict(item).items() if k != 'quantity'})
        item = replace(item, id=str(item.id), quantity=1)

        if not self._lines:
            self._save([item])
            return CartResult(True)

        current_seller = self.get_current_seller()
        if item.seller != current_seller:
            return CartResult(False, seller_mismatch_message(current_seller, item.seller))

        if self.get_line(item.id):
            lines = [
                replace(line, quantity=line.quantity + 1) if line.id == item.id else line
                for line in self._lines
            ]
        else:
            lines = self._lines + [item]
        self._save(lines)
        return CartResult(True)

    def update_quantity(self, product_id, quantity):
        self._check_ready()
        quantity = int(quantity)
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        product_id = str(product_id)
        self._save([
            replace(line, quantity=quantity) if line.id == product_id else line
            for line in self._lines
        ])

    def remove_from_cart(self, product_id):
        self._check_ready()
        product_id = str(product_id)
        self._save([line for line in self._lines if line.id != product_id])

    def move_to_wishlist(self, product_id):
        """Take a line out of the cart so the caller can wishlist it."""
        line = self.get_line(product_id)
        self.remove_from_cart(product_id)
        return line

    def clear_cart(self):
        self._check_ready()
        self._save([])

    def get_cart_total(self):
        return sum(line.line_total for line in self.items)

    def get_cart_count(self):
        return sum(line.quantity for line in self.items)

    def get_current_seller(self):
        items = self.items
        return items[0].seller if items else None
