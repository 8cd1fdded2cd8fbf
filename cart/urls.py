from django.urls import path

from . import views

urlpatterns = [
    # === PANIER (AJAX / SESSIONS) ===
    path('cart/add/<int:item_id>/', views.add_to_cart, name='add-to-cart'),
    path('cart/remove/<str:item_id>/', views.remove_from_cart, name='remove-from-cart'),
    path('cart/update/<str:item_id>/', views.update_cart, name='update-cart'),
    path('cart/clear/', views.clear_cart, name='clear-cart'),
    path('cart/summary/', views.cart_summary_view, name='cart-summary'),

    # Fragments header/footer
    path('components/<str:name>/', views.component, name='component'),
]
