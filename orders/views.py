import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from cart.utils.cart_utils import session_store
from .models import Order
from .serializers import OrderSerializer, OrderStatusSerializer
from .services import build_order_payload, create_order

logger = logging.getLogger(__name__)


def _json_body(request):
    """Parsed JSON object from the body, or None when it is not one."""
    try:
        data = json.loads(request.body or b'{}')
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _first_error(errors):
    """Flatten DRF errors into one readable message."""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = _first_error(value)
            if message:
                return message if field == 'non_field_errors' else f"{field}: {message}"
    elif isinstance(errors, list):
        for value in errors:
            message = _first_error(value)
            if message:
                return message
    elif errors:
        return str(errors)
    return ''


def _place_order(data):
    serializer = OrderSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({'error': _first_error(serializer.errors), 'errors': serializer.errors}, status=400)
    try:
        order = create_order(serializer.validated_data)
    except Exception as e:
        logger.error(f"Error creating order: {str(e)}")
        return JsonResponse({'error': 'Failed to create order'}, status=500)
    return JsonResponse({
        'success': True,
        'orderId': order.order_id,
        'message': 'Order placed successfully',
    }, status=201)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def orders_collection(request):
    if request.method == 'POST':
        data = _json_body(request)
        if data is None:
            return JsonResponse({'error': 'Invalid JSON'}, status=400)
        return _place_order(data)

    # Suivi des commandes par email
    email = request.GET.get('email', '').strip().lower()
    if not email:
        return JsonResponse({'error': 'Email parameter is required'}, status=400)
    orders = Order.objects.filter(email=email).order_by('-created_at')
    return JsonResponse({'success': True, 'orders': [order.to_dict() for order in orders]})


@csrf_exempt
@require_http_methods(["POST"])
def checkout(request):
    """Place an order from the session cart; the cart is cleared only on success."""
    customer = _json_body(request)
    if customer is None:
        return JsonResponse({'error': 'Invalid JSON'}, status=400)

    store = session_store(request)
    try:
        if store.is_empty():
            return JsonResponse({'error': 'Your cart is empty'}, status=400)
        response = _place_order(build_order_payload(store, customer))
        if response.status_code == 201:
            store.clear()
        return response
    finally:
        store.close()


@csrf_exempt
@require_http_methods(["GET", "DELETE"])
def order_detail(request, order_id):
    order = Order.objects.filter(order_id=order_id).first()
    if order is None:
        return JsonResponse({'error': 'Order not found'}, status=404)
    if request.method == 'DELETE':
        order.delete()
        logger.info("Order %s deleted", order_id)
        return JsonResponse({'success': True, 'message': 'Order deleted successfully'})
    return JsonResponse({'success': True, 'order': order.to_dict()})


@csrf_exempt
@require_http_methods(["PUT", "PATCH"])
def update_order_status(request, order_id):
    data = _json_body(request)
    serializer = OrderStatusSerializer(data=data or {})
    if not serializer.is_valid():
        return JsonResponse({'error': 'Invalid status'}, status=400)

    order = Order.objects.filter(order_id=order_id).first()
    if order is None:
        return JsonResponse({'error': 'Order not found'}, status=404)

    status = serializer.validated_data['status']
    order.status = status
    order.add_timeline_entry(serializer.validated_data.get('message') or f"Order status updated to {status}")
    order.save()
    logger.info("Order %s status updated to %s", order_id, status)
    return JsonResponse({'success': True, 'message': 'Order status updated successfully'})
