from django.urls import path

from . import views

urlpatterns = [
    path('api/menu/', views.menu_collection, name='menu'),
    path('api/menu/<int:item_id>/', views.menu_item, name='menu-item'),
    path('api/gallery/', views.gallery, name='gallery'),
    path('api/staff/', views.staff, name='staff'),
]
