from ..cart import CartStore, clamp_quantity
from ..storage import SessionStorage


def session_store(request):
    """CartStore bound to the visitor's session."""
    if request.session.session_key is None:
        request.session.save()
    return CartStore(SessionStorage(request.session))


def candidate_from_menu_item(item, quantity=1):
    return {
        'id': str(item.id),
        'name': item.name,
        'price': item.price,
        'image': item.image,
        'quantity': clamp_quantity(quantity),
    }


def line_to_dict(line):
    data = line.to_dict()
    data['price'] = float(line.price)
    data['subtotal'] = float(line.subtotal)
    return data


def cart_payload(store):
    return {
        'cart': [line_to_dict(line) for line in store.get_items()],
        'cart_count': store.get_count(),
        'cart_total': float(store.get_total()),
    }
