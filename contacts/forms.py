from datetime import datetime

import bleach
from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from .models import ContactMessage, Reservation

ALLOWED_TAGS = ['b', 'i', 'u', 'strong', 'em', 'br', 'p']


def clean_text(value):
    """Strip markup other than basic formatting."""
    return bleach.clean(value.strip(), tags=ALLOWED_TAGS, strip=True)


class ContactForm(forms.ModelForm):

    class Meta:
        model = ContactMessage
        fields = ['name', 'email', 'phone', 'subject', 'message']

    def clean_name(self):
        return bleach.clean(self.cleaned_data['name'].strip(), tags=[], strip=True)

    def clean_subject(self):
        return bleach.clean(self.cleaned_data.get('subject', '').strip(), tags=[], strip=True)

    def clean_message(self):
        message = clean_text(self.cleaned_data.get('message', ''))
        if not message:
            raise ValidationError("Message cannot be empty.")
        return message


class ReservationForm(forms.ModelForm):

    class Meta:
        model = Reservation
        fields = ['name', 'email', 'phone', 'date', 'time', 'party_size', 'special_requests']

    def clean_special_requests(self):
        return clean_text(self.cleaned_data.get('special_requests', ''))

    def clean(self):
        cleaned_data = super().clean()
        date = cleaned_data.get('date')
        time = cleaned_data.get('time')
        if date and time:
            slot = timezone.make_aware(datetime.combine(date, time))
            if slot < timezone.now():
                raise ValidationError("Cannot make a reservation in the past")
        return cleaned_data


class ReservationStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Reservation.STATUS_CHOICES)
