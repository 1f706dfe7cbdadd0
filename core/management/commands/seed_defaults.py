"""
Django management command to seed the company settings and the default admin.

Usage:
    python manage.py seed_defaults
"""
from django.conf import settings
from django.core.management.base import BaseCommand

from core.models import AppSetting, User, UserRole


class Command(BaseCommand):
    help = 'Seed default company settings and the default admin account'

    def add_arguments(self, parser):
        parser.add_argument('--admin-email', default=settings.DEFAULT_ADMIN_EMAIL)
        parser.add_argument('--admin-password', default=settings.DEFAULT_ADMIN_PASSWORD)

    def handle(self, *args, **options):
        created_settings = AppSetting.objects.ensure_defaults()
        self.stdout.write(self.style.SUCCESS(f'✅ Settings: {created_settings} default keys created'))

        email = options['admin_email']
        if User.objects.filter(email=email).exists():
            self.stdout.write(f'⏭️  Admin exists: {email}')
            return

        User.objects.create_superuser(
            email=email,
            password=options['admin_password'],
            name='Administrator',
            role=UserRole.ADMIN,
        )
        self.stdout.write(self.style.SUCCESS(f'✅ Admin created: {email}'))
