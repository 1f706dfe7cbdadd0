"""
CORE App - Users and Company Settings

Handles: Users (Admins, Employees), key/value company settings (branding, SMTP)
"""

from dataclasses import dataclass

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class UserRole(models.TextChoices):
    """User role enumeration."""
    ADMIN = 'admin', 'Administrator'
    EMPLOYEE = 'employee', 'Employee'


class UserManager(BaseUserManager):
    """Custom user manager for e-mail based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('An e-mail address is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using e-mail as login identifier.

    Key Business Logic:
    - employee_id is auto-generated (EMP001, EMP002...) when left blank
    - last_active is refreshed by the dashboard heartbeat
    - admins cannot be deleted through the API
    """

    email = models.EmailField(unique=True, verbose_name="E-mail")
    name = models.CharField(max_length=150, verbose_name="Full name")
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.EMPLOYEE,
        verbose_name="Role"
    )

    # Employee profile
    employee_id = models.CharField(
        max_length=30,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Employee ID"
    )
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    picture = models.ImageField(
        upload_to='profiles/',
        null=True,
        blank=True,
        verbose_name="Profile picture"
    )
    last_active = models.DateTimeField(null=True, blank=True)

    # Django Auth Fields
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name or self.email} ({self.role})"

    def save(self, *args, **kwargs):
        """
        Auto-generate employee_id once the primary key is known.
        Format: EMP + zero-padded id (EMP007), ADMIN + id for admins.
        """
        super().save(*args, **kwargs)

        if not self.employee_id:
            prefix = 'ADMIN' if self.role == UserRole.ADMIN else 'EMP'
            candidate = f"{prefix}{self.pk:03d}"
            if not User.objects.filter(employee_id=candidate).exclude(pk=self.pk).exists():
                self.employee_id = candidate
                super().save(update_fields=['employee_id'])

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE


# ===========================================
# COMPANY SETTINGS (key/value store)
# ===========================================

DEFAULT_SETTINGS = {
    'company_name': settings.DEFAULT_COMPANY_NAME,
    'company_logo': '',
    'smtp_enabled': 'false',
    'smtp_host': '',
    'smtp_port': '587',
    'smtp_use_tls': 'true',
    'smtp_user': '',
    'smtp_password': '',
    'smtp_from_email': '',
    'smtp_from_name': '',
}

MASKED_SETTINGS = ('smtp_password',)


@dataclass(frozen=True)
class CompanySettings:
    """
    Immutable snapshot of the company settings.

    Read once per request (or task) and passed explicitly to the
    report renderer and mailer.
    """
    company_name: str
    company_logo: str
    smtp_enabled: bool
    smtp_host: str
    smtp_port: int
    smtp_use_tls: bool
    smtp_user: str
    smtp_password: str
    smtp_from_email: str
    smtp_from_name: str

    @classmethod
    def from_mapping(cls, values: dict) -> 'CompanySettings':
        merged = {**DEFAULT_SETTINGS, **{k: v for k, v in values.items() if v is not None}}
        try:
            port = int(merged['smtp_port'])
        except (TypeError, ValueError):
            port = int(DEFAULT_SETTINGS['smtp_port'])

        return cls(
            company_name=merged['company_name'] or settings.DEFAULT_COMPANY_NAME,
            company_logo=merged['company_logo'],
            smtp_enabled=str(merged['smtp_enabled']).lower() == 'true',
            smtp_host=merged['smtp_host'],
            smtp_port=port,
            smtp_use_tls=str(merged['smtp_use_tls']).lower() == 'true',
            smtp_user=merged['smtp_user'],
            smtp_password=merged['smtp_password'],
            smtp_from_email=merged['smtp_from_email'],
            smtp_from_name=merged['smtp_from_name'],
        )

    @property
    def sender(self) -> str:
        """From header, e.g. 'L&A Logistics <noreply@example.com>'."""
        return f"{self.smtp_from_name or self.company_name} <{self.smtp_from_email}>"


class AppSettingManager(models.Manager):

    def ensure_defaults(self):
        """Insert missing default keys without touching existing values."""
        created = 0
        for key, value in DEFAULT_SETTINGS.items():
            _, was_created = self.get_or_create(key=key, defaults={'value': value})
            created += int(was_created)
        return created

    def as_dict(self) -> dict:
        return dict(self.values_list('key', 'value'))

    def snapshot(self) -> CompanySettings:
        return CompanySettings.from_mapping(self.as_dict())

    def update_values(self, values: dict) -> list:
        """
        Update known keys only. Unknown keys are ignored.

        Returns the list of keys actually written.
        """
        updated = []
        for key, value in values.items():
            if key not in DEFAULT_SETTINGS:
                continue
            self.update_or_create(key=key, defaults={'value': '' if value is None else str(value)})
            updated.append(key)
        return updated


class AppSetting(models.Model):
    """A single company setting (company_name, smtp_host, ...)."""

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AppSettingManager()

    class Meta:
        verbose_name = "Setting"
        verbose_name_plural = "Settings"
        ordering = ['key']

    def __str__(self):
        if self.key in MASKED_SETTINGS:
            return f"{self.key} = ***"
        return f"{self.key} = {self.value}"
