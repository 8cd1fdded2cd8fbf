import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .forms import ContactForm, ReservationForm, ReservationStatusForm
from .models import ContactMessage, Reservation

logger = logging.getLogger(__name__)

# Champs du formulaire HTML -> champs du modèle
RESERVATION_ALIASES = {
    'name': ('name', 'res-name'),
    'email': ('email', 'res-email'),
    'phone': ('phone', 'res-phone'),
    'date': ('date', 'res-date'),
    'time': ('time', 'res-time'),
    'party_size': ('party_size', 'partySize', 'guests', 'res-guests'),
    'special_requests': ('special_requests', 'specialRequests', 'res-requests'),
}


def _request_data(request):
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            return None
        return data if isinstance(data, dict) else None
    return request.POST.dict()


def _form_error(form):
    for field, errors in form.errors.items():
        if field == '__all__':
            return errors[0]
        return f"{field}: {errors[0]}"
    return 'Invalid data'


# ============ CONTACT / MESSAGES ============

def _create_message(request):
    data = _request_data(request)
    if data is None:
        return JsonResponse({'error': 'Invalid JSON'}, status=400)
    if not data.get('name') or not data.get('email') or not data.get('message'):
        return JsonResponse({'error': 'Name, email, and message are required'}, status=400)

    form = ContactForm(data)
    if not form.is_valid():
        return JsonResponse({'error': _form_error(form)}, status=400)
    message = form.save()
    logger.info("Contact message %s received from %s", message.id, message.email)
    return JsonResponse({
        'success': True,
        'message': 'Thank you for your message. We will get back to you soon!',
        'messageId': message.id,
    }, status=201)


@csrf_exempt
@require_http_methods(["POST"])
def submit_contact(request):
    try:
        return _create_message(request)
    except Exception as e:
        logger.error(f"Contact submission error: {str(e)}")
        return JsonResponse({'error': 'An error occurred while processing your request'}, status=500)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def messages_collection(request):
    if request.method == 'POST':
        return _create_message(request)
    messages = ContactMessage.objects.order_by('-created_at')
    return JsonResponse({'messages': [m.to_dict() for m in messages]})


@require_http_methods(["GET"])
def message_detail(request, message_id):
    message = ContactMessage.objects.filter(id=message_id).first()
    if message is None:
        return JsonResponse({'error': 'Message not found'}, status=404)
    return JsonResponse(message.to_dict())


@csrf_exempt
@require_http_methods(["PATCH"])
def mark_message_read(request, message_id):
    message = ContactMessage.objects.filter(id=message_id).first()
    if message is None:
        return JsonResponse({'error': 'Message not found'}, status=404)
    message.mark_read()
    return JsonResponse({'message': 'Message marked as read'})


# ============ RÉSERVATIONS ============

def _reservation_fields(data):
    fields = {}
    for field, aliases in RESERVATION_ALIASES.items():
        for alias in aliases:
            if data.get(alias) not in (None, ''):
                fields[field] = data[alias]
                break
    return fields


def _create_reservation(request):
    data = _request_data(request)
    if data is None:
        return JsonResponse({'error': 'Invalid JSON'}, status=400)
    fields = _reservation_fields(data)
    required = ('name', 'email', 'phone', 'date', 'time', 'party_size')
    if any(field not in fields for field in required):
        return JsonResponse({
            'error': 'Name, email, phone, date, time, and number of guests are required'
        }, status=400)

    form = ReservationForm(fields)
    if not form.is_valid():
        return JsonResponse({'error': _form_error(form)}, status=400)

    taken = Reservation.objects.filter(
        date=form.cleaned_data['date'],
        time=form.cleaned_data['time'],
    ).exclude(status='cancelled').exists()
    if taken:
        return JsonResponse({
            'error': 'This time slot is already booked. Please choose another time.'
        }, status=409)

    reservation = form.save()
    logger.info("Reservation %s created for %s", reservation.id, reservation)
    return JsonResponse({
        'success': True,
        'message': 'Reservation created successfully',
        'reservationId': reservation.id,
    }, status=201)


@csrf_exempt
@require_http_methods(["GET", "POST"])
def reservations_collection(request):
    if request.method == 'POST':
        try:
            return _create_reservation(request)
        except Exception as e:
            logger.error(f"Error creating reservation: {str(e)}")
            return JsonResponse({'error': 'Failed to create reservation'}, status=500)
    reservations = Reservation.objects.order_by('date', 'time')
    return JsonResponse({'reservations': [r.to_dict() for r in reservations]})


@require_http_methods(["GET"])
def reservation_detail(request, reservation_id):
    reservation = Reservation.objects.filter(id=reservation_id).first()
    if reservation is None:
        return JsonResponse({'error': 'Reservation not found'}, status=404)
    return JsonResponse(reservation.to_dict())


@csrf_exempt
@require_http_methods(["PATCH", "PUT"])
def update_reservation_status(request, reservation_id):
    form = ReservationStatusForm(_request_data(request) or {})
    if not form.is_valid():
        return JsonResponse({'error': 'Status is required'}, status=400)
    reservation = Reservation.objects.filter(id=reservation_id).first()
    if reservation is None:
        return JsonResponse({'error': 'Reservation not found'}, status=404)
    reservation.status = form.cleaned_data['status']
    reservation.save(update_fields=['status', 'updated_at'])
    return JsonResponse({'message': 'Reservation status updated successfully'})


@csrf_exempt
@require_http_methods(["PATCH"])
def cancel_reservation(request, reservation_id):
    data = _request_data(request) or {}
    email = (data.get('email') or '').strip().lower()
    if not email:
        return JsonResponse({'error': 'Email is required to cancel a reservation'}, status=400)
    reservation = Reservation.objects.filter(id=reservation_id, email=email).first()
    if reservation is None:
        return JsonResponse({'error': 'Reservation not found or email does not match'}, status=404)
    reservation.cancel()
    logger.info("Reservation %s cancelled", reservation_id)
    return JsonResponse({'message': 'Reservation cancelled successfully'})
