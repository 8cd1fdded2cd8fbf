import logging
from decimal import Decimal

import requests
from django.conf import settings
from django.db import transaction

from .models import Order

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Order submission failed; the cart was left untouched."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def delivery_fee_for(method):
    if method == Order.DELIVERY:
        return Decimal(str(getattr(settings, 'DELIVERY_FEE', '5.00')))
    return Decimal('0')


def build_order_payload(store, customer):
    """
    Order document for the order API from the cart contents and the
    customer fields (name, email, phone, address, deliveryMethod).
    """
    method = customer.get('deliveryMethod') or Order.DELIVERY
    subtotal = store.get_total()
    fee = delivery_fee_for(method)
    items = []
    for line in store.get_items():
        data = line.to_dict()
        data['price'] = float(line.price)
        items.append(data)
    return {
        'name': customer.get('name', ''),
        'email': customer.get('email', ''),
        'phone': customer.get('phone', ''),
        'address': customer.get('address', '') if method == Order.DELIVERY else '',
        'deliveryMethod': method,
        'items': items,
        'subtotal': float(subtotal),
        'deliveryFee': float(fee),
        'total': float(subtotal + fee),
    }


@transaction.atomic
def create_order(data):
    """Persist an order from OrderSerializer.validated_data."""
    items = []
    subtotal = Decimal('0')
    for line in data['items']:
        price = Decimal(line['price'])
        subtotal += price * line['quantity']
        items.append({**line, 'price': float(price)})

    fee = delivery_fee_for(data['deliveryMethod'])
    if data.get('subtotal') is not None and data['subtotal'] != subtotal:
        logger.warning("Client subtotal %s differs from computed %s", data['subtotal'], subtotal)

    order = Order.objects.create(
        name=data['name'],
        email=data['email'],
        phone=data['phone'],
        address=data['address'],
        delivery_method=data['deliveryMethod'],
        items=items,
        subtotal=subtotal,
        delivery_fee=fee,
        total=subtotal + fee,
    )
    logger.info("Order %s created for %s", order.order_id, order.email)
    return order


class CheckoutClient:
    """Submits the cart to the order API and clears it on success."""

    def __init__(self, base_url, http=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.http = http or requests.Session()
        self.timeout = timeout

    def submit(self, store, customer):
        if store.is_empty():
            raise CheckoutError("Your cart is empty")
        payload = build_order_payload(store, customer)
        try:
            response = self.http.post(f"{self.base_url}/api/orders/", json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Order submission failed: %s", exc)
            raise CheckoutError("Network error, please try again") from exc

        if not 200 <= response.status_code < 300:
            try:
                message = response.json().get('error') or 'Failed to place order'
            except ValueError:
                message = 'Failed to place order'
            logger.warning("Order API answered %s: %s", response.status_code, message)
            raise CheckoutError(message, status_code=response.status_code)

        order_id = response.json().get('orderId')
        store.clear()
        return order_id
