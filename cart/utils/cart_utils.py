from django.conf import settings


def delivery_fee(subtotal):
    cfg = getattr(settings, 'DELIVERY', {})
    if subtotal > cfg.get('FREE_ABOVE', 5000):
        return 0
    return cfg.get('FEE', 500)


def line_savings(line):
    if line.original_price and line.original_price > line.price:
        return (line.original_price - line.price) * line.quantity
    return 0


def format_ksh(amount):
    """Whole-shilling display, e.g. 5200 -> 'KSh 5,200'."""
    try:
        return f"KSh {round(float(amount)):,}"
    except (ValueError, TypeError):
        return "KSh 0"


def serialize_line(line):
    return {
        'id': line.id,
        'name': line.name,
        'price': line.price,
        'originalPrice': line.original_price,
        'image': line.image,
        'seller': line.seller,
        'quantity': line.quantity,
        'inStock': line.in_stock,
        'freeShipping': line.free_shipping,
        'lineTotal': line.line_total,
        'savings': line_savings(line),
    }


def cart_summary(store):
    """Everything the cart and checkout pages show about the cart."""
    items = store.items
    subtotal = store.get_cart_total()
    fee = delivery_fee(subtotal) if items else 0
    return {
        'items': [serialize_line(line) for line in items],
        'item_count': store.get_cart_count(),
        'line_count': len(items),
        'seller': store.get_current_seller(),
        'subtotal': subtotal,
        'delivery_fee': fee,
        'total': subtotal + fee,
        'savings': sum(line_savings(line) for line in items),
        'formatted_total': format_ksh(subtotal + fee),
    }
