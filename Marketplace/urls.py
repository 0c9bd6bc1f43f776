from . import views
from django.urls import path

urlpatterns = [
    path('products/', views.products_api, name='products_api'),
    path('products/<str:product_id>/reviews/', views.product_reviews, name='product_reviews'),
]
