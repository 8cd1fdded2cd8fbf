from django.urls import path

from . import views

urlpatterns = [
    path('api/contact/', views.submit_contact, name='contact'),
    # Messages
    path('api/messages/', views.messages_collection, name='messages'),
    path('api/messages/<int:message_id>/', views.message_detail, name='message-detail'),
    path('api/messages/<int:message_id>/read/', views.mark_message_read, name='message-read'),
    # Réservations
    path('api/reservations/', views.reservations_collection, name='reservations'),
    path('api/reservations/<int:reservation_id>/', views.reservation_detail, name='reservation-detail'),
    path('api/reservations/<int:reservation_id>/status/', views.update_reservation_status, name='reservation-status'),
    path('api/reservations/<int:reservation_id>/cancel/', views.cancel_reservation, name='reservation-cancel'),
]
