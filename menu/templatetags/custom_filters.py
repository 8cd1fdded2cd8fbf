from decimal import Decimal, InvalidOperation

from django import template
from django.conf import settings

register = template.Library()


@register.filter
def format_price(value):
    """RM 18.90"""
    label = getattr(settings, 'CURRENCY_LABEL', 'RM')
    try:
        return f"{label} {Decimal(str(value)):,.2f}"
    except (InvalidOperation, ValueError, TypeError):
        return f"{label} 0.00"


@register.filter
def delivery_label(fee):
    try:
        return format_price(fee) if Decimal(str(fee)) > 0 else 'Free'
    except (InvalidOperation, ValueError, TypeError):
        return 'Free'
