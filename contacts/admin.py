from django.contrib import admin

from .models import ContactMessage, Reservation


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'subject', 'read', 'created_at')
    list_filter = ('read',)
    search_fields = ('name', 'email', 'subject')


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ('name', 'date', 'time', 'party_size', 'status')
    list_filter = ('status', 'date')
    search_fields = ('name', 'email', 'phone')
