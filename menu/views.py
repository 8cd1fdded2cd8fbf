import json
import logging
from decimal import Decimal, InvalidOperation

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import Category, GalleryImage, MenuItem, StaffMember

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    'name': 'name',
    'description_en': 'description_en',
    'description_th': 'description_th',
    'vegetarian': 'vegetarian',
    'spicyLevel': 'spicy_level',
    'image': 'image',
    'available': 'available',
}


def _json_body(request):
    """Parsed JSON object from the body, or None when it is not one."""
    try:
        data = json.loads(request.body or b'{}')
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _apply_fields(item, data):
    """Copy editable fields from a payload onto a MenuItem."""
    for key, attr in EDITABLE_FIELDS.items():
        if key in data:
            setattr(item, attr, data[key])
    if 'price' in data:
        price = Decimal(str(data['price']))
        if price < 0:
            raise ValueError("Price must be positive")
        item.price = price
    if data.get('category'):
        item.category, _ = Category.objects.get_or_create(name=data['category'])


@csrf_exempt
@require_http_methods(["GET", "POST"])
def menu_collection(request):
    if request.method == 'GET':
        items = MenuItem.objects.select_related('category').filter(available=True)
        categories = Category.objects.order_by('order', 'name').values_list('name', flat=True)
        return JsonResponse({
            'items': [item.to_dict() for item in items],
            'categories': list(categories),
        })

    data = _json_body(request)
    if data is None:
        return JsonResponse({'error': 'Invalid JSON'}, status=400)
    if not data.get('name') or not data.get('category') or data.get('price') is None:
        return JsonResponse({'error': 'Name, price, and category are required'}, status=400)

    item = MenuItem()
    try:
        _apply_fields(item, data)
    except (InvalidOperation, ValueError):
        return JsonResponse({'error': 'Invalid price'}, status=400)
    item.save()
    logger.info("Menu item %s created", item.name)
    return JsonResponse(item.to_dict(), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def menu_item(request, item_id):
    item = MenuItem.objects.select_related('category').filter(id=item_id).first()
    if item is None:
        return JsonResponse({'error': 'Menu item not found'}, status=404)

    if request.method == 'GET':
        return JsonResponse(item.to_dict())

    if request.method == 'DELETE':
        item.delete()
        logger.info("Menu item %s deleted", item_id)
        return JsonResponse({'success': True})

    data = _json_body(request)
    if data is None:
        return JsonResponse({'error': 'Invalid JSON'}, status=400)
    try:
        _apply_fields(item, data)
    except (InvalidOperation, ValueError):
        return JsonResponse({'error': 'Invalid price'}, status=400)
    item.save()
    return JsonResponse(item.to_dict())


@require_http_methods(["GET"])
def gallery(request):
    return JsonResponse({'images': [image.to_dict() for image in GalleryImage.objects.all()]})


@require_http_methods(["GET"])
def staff(request):
    return JsonResponse({'team': [member.to_dict() for member in StaffMember.objects.all()]})
