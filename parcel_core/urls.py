"""
Parcel Platform Main URL Configuration
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


# ===========================================
# ADMIN SITE CUSTOMIZATION
# ===========================================
admin.site.site_header = "L&A Logistic Services"
admin.site.site_title = "L&A Admin"
admin.site.index_title = "Parcel Operations"


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request):
    """API Root endpoint with available routes."""
    return Response({
        'name': 'L&A Logistic Services API',
        'version': '1.0.0',
        'endpoints': {
            'auth': {
                'login': '/api/auth/login/',
                'refresh': '/api/auth/token/refresh/',
                'forgot_password': '/api/forgot-password/',
            },
            'parcels': {
                'list': '/api/parcels/',
                'summary': '/api/parcels/summary/',
                'estimate': '/api/parcels/estimate/',
            },
            'export': {
                'pdf': '/api/export/pdf/',
                'excel': '/api/export/excel/',
                'html': '/api/export/html/',
            },
            'email': {
                'report': '/api/email/send-report/',
                'employees': '/api/email/send-employee-report/',
            },
            'admin': {
                'users': '/api/admin/users/',
                'employees': '/api/admin/employees/',
                'settings': '/api/settings/',
            },
            'profile': '/api/profile/',
            'health': '/api/health/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API Root
    path('api/', api_root, name='api-root'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),

    # App URLs
    path('api/', include('core.urls')),
    path('api/', include('parcels.urls')),
    path('api/', include('reports.urls')),
]

# Serve uploaded files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
