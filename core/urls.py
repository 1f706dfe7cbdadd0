"""
Core App URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .health import health_check, readiness_check
from .views import (
    LoginView, AdminUserViewSet, EmployeeViewSet, ProfileViewSet,
    SettingsView, LogoUploadView, forgot_password
)

router = DefaultRouter()
router.register(r'admin/users', AdminUserViewSet, basename='admin-user')
router.register(r'admin/employees', EmployeeViewSet, basename='admin-employee')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', LoginView.as_view(), name='login'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('forgot-password/', forgot_password, name='forgot-password'),

    # Self-service endpoints
    path('profile/', ProfileViewSet.as_view({'get': 'profile', 'put': 'profile'}), name='profile'),
    path('change-password/', ProfileViewSet.as_view({'put': 'change_password'}), name='change-password'),
    path('update-activity/', ProfileViewSet.as_view({'post': 'update_activity'}), name='update-activity'),
    path('upload/profile/', ProfileViewSet.as_view({'post': 'upload_picture'}), name='upload-profile'),

    # Admin endpoints
    path('settings/', SettingsView.as_view(), name='settings'),
    path('upload/logo/', LogoUploadView.as_view(), name='upload-logo'),

    # Health
    path('health/', health_check, name='health'),
    path('health/ready/', readiness_check, name='health-ready'),

    # Router URLs
    path('', include(router.urls)),
]
