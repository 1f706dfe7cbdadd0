"""
Core App Views - Auth, User Management, Profile & Settings API
"""

import logging
import os
from smtplib import SMTPException

from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.utils import timezone
from django.utils.crypto import get_random_string
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from reports.mailer import ReportMailer
from .models import AppSetting, UserRole
from .permissions import IsAdminUser
from .serializers import (
    LoginSerializer, UserSerializer, UserCreateSerializer, EmployeeSerializer,
    ProfileUpdateSerializer, ChangePasswordSerializer, ForgotPasswordSerializer,
    PictureUploadSerializer, SettingsSerializer
)

logger = logging.getLogger(__name__)

User = get_user_model()

FORGOT_PASSWORD_MESSAGE = 'If an account exists with this email, a temporary password has been sent.'


class LoginView(TokenObtainPairView):
    """POST /api/auth/login/ {email, password} -> {token, refresh, user}"""

    serializer_class = LoginSerializer


# ===========================================
# ADMIN: USERS & EMPLOYEES
# ===========================================

class AdminUserViewSet(mixins.ListModelMixin,
                       mixins.CreateModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    """
    User accounts management (Admin only).

    Admin accounts cannot be deleted: they are invisible to destroy (404).
    """

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminUser]

    def get_queryset(self):
        if self.action == 'destroy':
            return User.objects.exclude(role=UserRole.ADMIN)
        return User.objects.all()

    def get_serializer_class(self):
        if self.action == 'create':
            return UserCreateSerializer
        return UserSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"[CORE] {self.request.user.email} created {user.role} account {user.email}")

    def perform_destroy(self, instance):
        logger.info(f"[CORE] {self.request.user.email} deleted account {instance.email}")
        instance.delete()


class EmployeeViewSet(mixins.ListModelMixin,
                      mixins.UpdateModelMixin,
                      viewsets.GenericViewSet):
    """Employee records (Admin only)."""

    queryset = User.objects.filter(role=UserRole.EMPLOYEE).order_by('name')
    serializer_class = EmployeeSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminUser]


# ===========================================
# SELF-SERVICE: PROFILE
# ===========================================

class ProfileViewSet(viewsets.ViewSet):
    """
    ViewSet for operations on the logged-in user.
    """

    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=['get', 'put'])
    def profile(self, request):
        """Get or update the current user's profile."""
        if request.method == 'GET':
            return Response(EmployeeSerializer(request.user).data)

        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(EmployeeSerializer(request.user).data)

    @action(detail=False, methods=['put'])
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={'user': request.user})
        serializer.is_valid(raise_exception=True)

        request.user.set_password(serializer.validated_data['newPassword'])
        request.user.save(update_fields=['password'])
        logger.info(f"[CORE] Password changed for {request.user.email}")

        return Response({'message': 'Password changed successfully'})

    @action(detail=False, methods=['post'])
    def update_activity(self, request):
        """Dashboard heartbeat: refresh last_active."""
        request.user.last_active = timezone.now()
        request.user.save(update_fields=['last_active'])
        return Response({'lastActive': request.user.last_active})

    @action(detail=False, methods=['post'])
    def upload_picture(self, request):
        serializer = PictureUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        request.user.picture = serializer.validated_data['image']
        request.user.save(update_fields=['picture'])

        return Response({'url': request.user.picture.url})


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
def forgot_password(request):
    """
    POST /api/forgot-password/ {email}

    E-mails a temporary password. The reply is the same whether or not
    the account exists.
    """
    serializer = ForgotPasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    mailer = ReportMailer(AppSetting.objects.snapshot())
    if not mailer.is_configured:
        return Response(
            {'message': 'Email is not configured. Please contact your administrator.'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user = User.objects.filter(email__iexact=serializer.validated_data['email']).first()
    if user is None:
        return Response({'message': FORGOT_PASSWORD_MESSAGE})

    temporary_password = get_random_string(8)
    try:
        mailer.send_password_reset(user, temporary_password)
    except (SMTPException, OSError) as e:
        logger.error(f"[EMAIL] Password reset mail to {user.email} failed: {e}")
        return Response(
            {'message': 'Failed to send reset email'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    # Only replaced once the mail is out, so a failed send keeps the old password
    user.set_password(temporary_password)
    user.save(update_fields=['password'])
    logger.info(f"[CORE] Temporary password issued for {user.email}")

    return Response({'message': FORGOT_PASSWORD_MESSAGE})


# ===========================================
# ADMIN: COMPANY SETTINGS
# ===========================================

class SettingsView(APIView):
    """GET/PUT /api/settings/ (Admin only)"""

    permission_classes = [permissions.IsAuthenticated, IsAdminUser]

    def get(self, request):
        return Response(SettingsSerializer(AppSetting.objects.as_dict()).data)

    def put(self, request):
        serializer = SettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        updated = AppSetting.objects.update_values(serializer.validated_data)
        logger.info(f"[CORE] {request.user.email} updated settings: {', '.join(updated) or 'none'}")

        return Response({
            'message': 'Settings updated successfully',
            'settings': SettingsSerializer(AppSetting.objects.as_dict()).data,
        })


class LogoUploadView(APIView):
    """POST /api/upload/logo/ (Admin only): stores the image and sets company_logo."""

    permission_classes = [permissions.IsAuthenticated, IsAdminUser]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        serializer = PictureUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        image = serializer.validated_data['image']
        extension = os.path.splitext(image.name)[1].lower()
        path = default_storage.save(f"logos/logo-{get_random_string(12)}{extension}", image)
        url = default_storage.url(path)

        AppSetting.objects.update_values({'company_logo': url})
        logger.info(f"[CORE] {request.user.email} uploaded a new company logo: {path}")

        return Response({'url': url})
