"""
Core App Serializers - Users, Profile & Settings
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import UserRole, DEFAULT_SETTINGS, MASKED_SETTINGS

User = get_user_model()


class LoginSerializer(TokenObtainPairSerializer):
    """JWT login returning the token pair plus a minimal user payload."""

    def validate(self, attrs):
        data = super().validate(attrs)
        return {
            'token': data['access'],
            'refresh': data['refresh'],
            'user': {
                'id': self.user.id,
                'name': self.user.name,
                'email': self.user.email,
                'role': self.user.role,
            }
        }


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User listings (admin)."""

    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'createdAt']
        read_only_fields = ['id', 'createdAt']


class UserCreateSerializer(serializers.ModelSerializer):
    """Serializer for admin-side user creation."""

    password = serializers.CharField(write_only=True, required=True, min_length=6)
    role = serializers.ChoiceField(choices=UserRole.choices, default=UserRole.EMPLOYEE)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'password', 'role']
        read_only_fields = ['id']
        extra_kwargs = {
            'email': {
                'error_messages': {'unique': 'Email already exists'}
            }
        }

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            role=validated_data.get('role', UserRole.EMPLOYEE),
        )


class EmployeeSerializer(serializers.ModelSerializer):
    """Full employee record (admin employee management and profile)."""

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'employee_id', 'address', 'phone',
            'picture', 'last_active', 'role', 'created_at'
        ]
        read_only_fields = ['id', 'picture', 'last_active', 'role', 'created_at']
        extra_kwargs = {
            'email': {
                'error_messages': {'unique': 'Email or Employee ID already exists'}
            },
            'employee_id': {
                'error_messages': {'unique': 'Email or Employee ID already exists'}
            },
        }


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields an employee may edit on their own profile."""

    class Meta:
        model = User
        fields = ['name', 'address', 'phone']


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for the change-password form."""

    currentPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(write_only=True, validators=[validate_password])

    def validate_currentPassword(self, value):
        user = self.context['user']
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect')
        return value


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PictureUploadSerializer(serializers.Serializer):
    """Single image upload (company logo or profile picture)."""

    image = serializers.ImageField()

    def validate_image(self, value):
        if value.size > settings.UPLOAD_MAX_IMAGE_SIZE:
            raise serializers.ValidationError('Image exceeds the 5MB limit')
        return value


class SettingsSerializer(serializers.Serializer):
    """
    Company settings, read and partially updated by admins.

    The SMTP password is never echoed back: reads return '***' when set,
    and writing '***' keeps the stored value.
    """

    company_name = serializers.CharField(required=False, allow_blank=True)
    company_logo = serializers.CharField(required=False, allow_blank=True)
    smtp_enabled = serializers.BooleanField(required=False)
    smtp_host = serializers.CharField(required=False, allow_blank=True)
    smtp_port = serializers.CharField(required=False, allow_blank=True)
    smtp_use_tls = serializers.BooleanField(required=False)
    smtp_user = serializers.CharField(required=False, allow_blank=True)
    smtp_password = serializers.CharField(required=False, allow_blank=True)
    smtp_from_email = serializers.CharField(required=False, allow_blank=True)
    smtp_from_name = serializers.CharField(required=False, allow_blank=True)

    def to_representation(self, instance):
        data = {key: instance.get(key, default) for key, default in DEFAULT_SETTINGS.items()}
        for key in MASKED_SETTINGS:
            data[key] = '***' if data.get(key) else ''
        return data

    def validate_smtp_port(self, value):
        if value and not str(value).isdigit():
            raise serializers.ValidationError('Port must be a number')
        return value

    def validate(self, attrs):
        for key in ('smtp_enabled', 'smtp_use_tls'):
            if key in attrs:
                attrs[key] = 'true' if attrs[key] else 'false'
        for key in MASKED_SETTINGS:
            if attrs.get(key) == '***':
                attrs.pop(key)
        return attrs
