import json
import logging

from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.template.loader import render_to_string
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from menu.models import MenuItem
from .cart import MAX_QUANTITY
from .context import COMPONENTS
from .utils.cart_utils import candidate_from_menu_item, cart_payload, session_store

logger = logging.getLogger(__name__)


def _requested_quantity(request, default=1):
    """Quantity from form data or a JSON body. Raises ValueError/TypeError."""
    if request.content_type == 'application/json':
        data = json.loads(request.body or b'{}')
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object")
        value = data.get('quantity', default)
    else:
        value = request.POST.get('quantity', default)
    return int(value)


def _cart_response(store, status=200, **extra):
    data = {'success': True, **cart_payload(store), **extra}
    store.close()
    return JsonResponse(data, status=status)


@csrf_exempt
@require_http_methods(["POST"])
def add_to_cart(request, item_id):
    try:
        quantity = _requested_quantity(request)
    except (ValueError, TypeError):
        return JsonResponse({'error': 'Invalid quantity'}, status=400)
    if quantity <= 0:
        return JsonResponse({'error': 'Quantity must be positive'}, status=400)

    item = get_object_or_404(MenuItem, id=item_id, available=True)
    store = session_store(request)
    candidate = candidate_from_menu_item(item, quantity)
    existing = next(
        (line for line in store.get_items() if line.matches(candidate['id'], candidate['image'])), None
    )
    if existing is not None:
        # The merged line must stay within MAX_QUANTITY
        room = MAX_QUANTITY - existing.quantity
        if room <= 0:
            store.close()
            return JsonResponse({'error': f'Maximum quantity of {MAX_QUANTITY} reached'}, status=400)
        candidate['quantity'] = min(candidate['quantity'], room)
    try:
        added = store.add_item(candidate)
    except Exception:
        logger.exception("Error adding menu item %s to cart", item_id)
        store.close()
        return JsonResponse({'error': 'Failed to add item to cart'}, status=500)
    if not added:
        store.close()
        return JsonResponse({'error': 'Item cannot be added to cart'}, status=400)
    return _cart_response(store)


@csrf_exempt
@require_http_methods(["POST"])
def remove_from_cart(request, item_id):
    store = session_store(request)
    removed = store.remove_item(item_id)
    return _cart_response(store, removed=removed)


@csrf_exempt
@require_http_methods(["POST"])
def update_cart(request, item_id):
    try:
        quantity = _requested_quantity(request)
    except (ValueError, TypeError):
        return JsonResponse({'error': 'Invalid quantity'}, status=400)

    store = session_store(request)
    # Clamp here: the store accepts any positive value
    updated = store.update_quantity(item_id, min(quantity, MAX_QUANTITY))
    return _cart_response(store, updated=updated)


@csrf_exempt
@require_http_methods(["POST"])
def clear_cart(request):
    store = session_store(request)
    store.clear()
    return _cart_response(store)


@require_http_methods(["GET"])
def cart_summary_view(request):
    return _cart_response(session_store(request))


@require_http_methods(["GET"])
def component(request, name):
    template = COMPONENTS.get(name)
    if template is None:
        raise Http404(f"Unknown component {name}")
    return HttpResponse(render_to_string(template, request=request))
