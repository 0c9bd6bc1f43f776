from django.urls import include, path

urlpatterns = [
    path('cart/', include('cart.urls')),
    path('payments/', include('payments.urls')),
    path('', include('Marketplace.urls')),
]
