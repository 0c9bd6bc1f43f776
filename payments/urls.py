from django.urls import path
from . import views

urlpatterns = [
    path('checkout/', views.checkout, name='checkout'),
    path('checkout/cancel/', views.cancel_checkout, name='cancel-checkout'),
    path('status/<str:order_id>/', views.payment_status, name='payment-status'),
    path('orders/', views.order_history, name='order-history'),
]
