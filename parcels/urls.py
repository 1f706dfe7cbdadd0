"""
Parcels App URL Configuration
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ParcelEntryViewSet

router = DefaultRouter()
router.register(r'parcels', ParcelEntryViewSet, basename='parcel')

urlpatterns = [
    path('', include(router.urls)),
]
