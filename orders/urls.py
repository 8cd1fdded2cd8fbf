from django.urls import path

from . import views

urlpatterns = [
    path('api/orders/', views.orders_collection, name='orders'),
    path('api/orders/checkout/', views.checkout, name='checkout'),
    path('api/orders/<str:order_id>/', views.order_detail, name='order-detail'),
    path('api/orders/<str:order_id>/status/', views.update_order_status, name='order-status'),
]
