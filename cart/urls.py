from django.urls import path
from . import views

urlpatterns = [
    path('add/', views.add_to_cart, name='add-to-cart'),
    path('remove/<str:product_id>/', views.remove_from_cart, name='remove-from-cart'),
    path('update/<str:product_id>/', views.update_cart, name='update-cart'),
    path('wishlist/<str:product_id>/', views.move_to_wishlist, name='move-to-wishlist'),
    path('clear/', views.clear_cart, name='clear-cart'),
    path('summary/', views.cart_summary_view, name='cart-summary'),
]
