"""
Core Tests
==========

Tests for:
1. Custom User Model (creation, roles, employee IDs)
2. Company settings store and snapshot
3. Auth, user management and profile endpoints
4. Settings endpoint (masking, partial updates) and uploads
5. Middleware (rate limiting) and health checks
6. seed_defaults management command
"""

import shutil
import tempfile
from io import BytesIO, StringIO

from django.core import mail
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase, override_settings
from PIL import Image
from rest_framework import status
from rest_framework.test import APIClient

from core.models import AppSetting, CompanySettings, DEFAULT_SETTINGS, User, UserRole

LOCMEM_EMAIL = 'django.core.mail.backends.locmem.EmailBackend'


def png_upload(name='logo.png'):
    buffer = BytesIO()
    Image.new('RGB', (8, 8), color='orange').save(buffer, 'PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class TestUserModel(TestCase):
    """Tests for the custom User model."""

    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com',
            password='testpass123',
            name='Admin Test',
            role=UserRole.ADMIN,
        )
        self.employee = User.objects.create_user(
            email='employee@example.com',
            password='testpass123',
            name='Employee Test',
        )

    def test_user_creation_with_email(self):
        self.assertEqual(self.employee.email, 'employee@example.com')
        self.assertTrue(self.employee.check_password('testpass123'))

    def test_default_role_is_employee(self):
        self.assertEqual(self.employee.role, UserRole.EMPLOYEE)
        self.assertTrue(self.employee.is_employee)
        self.assertFalse(self.employee.is_admin)

    def test_employee_id_generated(self):
        self.assertEqual(self.employee.employee_id, f'EMP{self.employee.pk:03d}')
        self.assertEqual(self.admin.employee_id, f'ADMIN{self.admin.pk:03d}')

    def test_explicit_employee_id_kept(self):
        user = User.objects.create_user(
            email='custom@example.com', password='testpass123',
            name='Custom', employee_id='SPX-42',
        )
        self.assertEqual(user.employee_id, 'SPX-42')

    def test_superuser_creation(self):
        superuser = User.objects.create_superuser(
            email='root@example.com', password='superpass123', name='Root',
        )
        self.assertTrue(superuser.is_staff)
        self.assertTrue(superuser.is_superuser)
        self.assertEqual(superuser.role, UserRole.ADMIN)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='testpass123')

    def test_duplicate_email_rejected(self):
        from django.db import IntegrityError, transaction
        with self.assertRaises(IntegrityError), transaction.atomic():
            User.objects.create_user(email='employee@example.com', password='x', name='Dup')


class TestCompanySettings(TestCase):
    """Tests for the key/value settings store and its snapshot."""

    def test_ensure_defaults_is_idempotent(self):
        self.assertEqual(AppSetting.objects.ensure_defaults(), len(DEFAULT_SETTINGS))
        self.assertEqual(AppSetting.objects.ensure_defaults(), 0)
        self.assertEqual(AppSetting.objects.get(key='smtp_port').value, '587')

    def test_update_values_ignores_unknown_keys(self):
        updated = AppSetting.objects.update_values({'company_name': 'ACME', 'theme': 'dark'})
        self.assertEqual(updated, ['company_name'])
        self.assertFalse(AppSetting.objects.filter(key='theme').exists())

    def test_snapshot_parses_types(self):
        AppSetting.objects.update_values({'smtp_enabled': 'true', 'smtp_port': '465'})
        company = AppSetting.objects.snapshot()
        self.assertIs(company.smtp_enabled, True)
        self.assertEqual(company.smtp_port, 465)

    def test_snapshot_defaults_for_missing_keys(self):
        company = CompanySettings.from_mapping({})
        self.assertEqual(company.company_name, 'L&A Logistic Services')
        self.assertFalse(company.smtp_enabled)
        self.assertEqual(company.smtp_port, 587)

    def test_snapshot_bad_port_falls_back(self):
        self.assertEqual(CompanySettings.from_mapping({'smtp_port': 'abc'}).smtp_port, 587)

    def test_sender_prefers_from_name(self):
        company = CompanySettings.from_mapping({'smtp_from_email': 'a@example.com'})
        self.assertEqual(company.sender, 'L&A Logistic Services <a@example.com>')

    def test_snapshot_is_immutable(self):
        from dataclasses import FrozenInstanceError
        company = CompanySettings.from_mapping({})
        with self.assertRaises(FrozenInstanceError):
            company.company_name = 'Other'


class TestAuthAPI(TestCase):

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.employee = User.objects.create_user(
            email='juan@example.com', password='testpass123', name='Juan Cruz',
        )

    def test_login_returns_token_and_user(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'juan@example.com', 'password': 'testpass123',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('token', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user'], {
            'id': self.employee.id, 'name': 'Juan Cruz',
            'email': 'juan@example.com', 'role': 'employee',
        })

    def test_token_grants_access(self):
        token = self.client.post('/api/auth/login/', {
            'email': 'juan@example.com', 'password': 'testpass123',
        }, format='json').data['token']

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get('/api/profile/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'juan@example.com')

    def test_login_wrong_password(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'juan@example.com', 'password': 'nope',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_rate_limited(self):
        for _ in range(10):
            self.client.post('/api/auth/login/', {
                'email': 'juan@example.com', 'password': 'nope',
            }, format='json')

        response = self.client.post('/api/auth/login/', {
            'email': 'juan@example.com', 'password': 'testpass123',
        }, format='json')

        self.assertEqual(response.status_code, 429)
        self.assertIn('Retry-After', response)


class TestUserManagementAPI(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='admin@example.com', password='testpass123',
            name='Admin', role=UserRole.ADMIN,
        )
        self.employee = User.objects.create_user(
            email='juan@example.com', password='testpass123', name='Juan Cruz',
        )

    def test_employee_cannot_list_users(self):
        self.client.force_authenticate(self.employee)
        response = self.client.get('/api/admin/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_lists_users(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/admin/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({u['email'] for u in response.data}, {'admin@example.com', 'juan@example.com'})
        self.assertIn('createdAt', response.data[0])

    def test_admin_creates_employee(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post('/api/admin/users/', {
            'name': 'Ana Reyes', 'email': 'ana@example.com', 'password': 'secret1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='ana@example.com')
        self.assertEqual(user.role, UserRole.EMPLOYEE)
        self.assertTrue(user.check_password('secret1'))
        self.assertNotIn('password', response.data)

    def test_duplicate_email(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post('/api/admin/users/', {
            'name': 'Juan Again', 'email': 'juan@example.com', 'password': 'secret1',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['email'][0], 'Email already exists')

    def test_delete_employee(self):
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/admin/users/{self.employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.employee.pk).exists())

    def test_admin_cannot_be_deleted(self):
        self.client.force_authenticate(self.admin)
        response = self.client.delete(f'/api/admin/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_employees_list_only_employees(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/admin/employees/')
        self.assertEqual([e['email'] for e in response.data], ['juan@example.com'])
        self.assertEqual(response.data[0]['employee_id'], self.employee.employee_id)

    def test_update_employee(self):
        self.client.force_authenticate(self.admin)

        response = self.client.put(f'/api/admin/employees/{self.employee.id}/', {
            'name': 'Juan dela Cruz',
            'email': 'juan@example.com',
            'employee_id': 'EMP-JUAN',
            'address': 'Quezon City',
            'phone': '09171234567',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.employee_id, 'EMP-JUAN')
        self.assertEqual(self.employee.address, 'Quezon City')


class TestProfileAPI(TestCase):

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.employee = User.objects.create_user(
            email='juan@example.com', password='testpass123', name='Juan Cruz',
        )
        self.client.force_authenticate(self.employee)
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

    def test_update_profile(self):
        response = self.client.put('/api/profile/', {
            'name': 'Juan C.', 'phone': '0917', 'role': 'admin',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.name, 'Juan C.')
        self.assertEqual(self.employee.phone, '0917')
        self.assertEqual(self.employee.role, UserRole.EMPLOYEE)

    def test_change_password(self):
        response = self.client.put('/api/change-password/', {
            'currentPassword': 'testpass123', 'newPassword': 'Parcel-Route-2025!',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertTrue(self.employee.check_password('Parcel-Route-2025!'))

    def test_change_password_wrong_current(self):
        response = self.client.put('/api/change-password/', {
            'currentPassword': 'wrong', 'newPassword': 'Parcel-Route-2025!',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('currentPassword', response.data)

    def test_update_activity(self):
        response = self.client.post('/api/update-activity/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertIsNotNone(self.employee.last_active)

    def test_upload_profile_picture(self):
        with override_settings(MEDIA_ROOT=self.media_root):
            response = self.client.post('/api/upload/profile/', {'image': png_upload('me.png')}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('profiles/', response.data['url'])

    def test_upload_rejects_non_images(self):
        bogus = SimpleUploadedFile('notes.png', b'not an image', content_type='image/png')
        response = self.client.post('/api/upload/profile/', {'image': bogus}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


@override_settings(EMAIL_BACKEND=LOCMEM_EMAIL)
class TestForgotPasswordAPI(TestCase):

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.employee = User.objects.create_user(
            email='juan@example.com', password='testpass123', name='Juan Cruz',
        )

    def _enable_smtp(self):
        AppSetting.objects.update_values({
            'smtp_enabled': 'true',
            'smtp_host': 'smtp.example.com',
            'smtp_from_email': 'noreply@example.com',
        })

    def test_requires_smtp(self):
        response = self.client.post('/api/forgot-password/', {'email': 'juan@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.get(pk=self.employee.pk).check_password('testpass123'))

    def test_sends_temporary_password(self):
        self._enable_smtp()

        response = self.client.post('/api/forgot-password/', {'email': 'juan@example.com'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['juan@example.com'])
        self.employee.refresh_from_db()
        self.assertFalse(self.employee.check_password('testpass123'))

    def test_unknown_email_gets_same_reply(self):
        self._enable_smtp()

        known = self.client.post('/api/forgot-password/', {'email': 'juan@example.com'}, format='json')
        unknown = self.client.post('/api/forgot-password/', {'email': 'ghost@example.com'}, format='json')

        self.assertEqual(unknown.status_code, status.HTTP_200_OK)
        self.assertEqual(known.data, unknown.data)
        self.assertEqual(len(mail.outbox), 1)


class TestSettingsAPI(TestCase):

    def setUp(self):
        self.client = APIClient()
        AppSetting.objects.ensure_defaults()
        AppSetting.objects.update_values({'smtp_password': 'secret'})
        self.admin = User.objects.create_user(
            email='admin@example.com', password='testpass123',
            name='Admin', role=UserRole.ADMIN,
        )
        self.employee = User.objects.create_user(
            email='juan@example.com', password='testpass123', name='Juan Cruz',
        )
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)

    def test_requires_admin(self):
        self.client.force_authenticate(self.employee)
        self.assertEqual(self.client.get('/api/settings/').status_code, status.HTTP_403_FORBIDDEN)

    def test_get_masks_password(self):
        self.client.force_authenticate(self.admin)

        response = self.client.get('/api/settings/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['smtp_password'], '***')
        self.assertEqual(response.data['company_name'], 'L&A Logistic Services')

    def test_masked_password_is_not_overwritten(self):
        self.client.force_authenticate(self.admin)

        response = self.client.put('/api/settings/', {
            'smtp_password': '***', 'smtp_host': 'smtp.example.com', 'smtp_enabled': True,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        values = AppSetting.objects.as_dict()
        self.assertEqual(values['smtp_password'], 'secret')
        self.assertEqual(values['smtp_host'], 'smtp.example.com')
        self.assertEqual(values['smtp_enabled'], 'true')

    def test_partial_update_leaves_other_keys(self):
        self.client.force_authenticate(self.admin)

        self.client.put('/api/settings/', {'company_name': 'L&A North'}, format='json')

        values = AppSetting.objects.as_dict()
        self.assertEqual(values['company_name'], 'L&A North')
        self.assertEqual(values['smtp_port'], '587')

    def test_starttls_can_be_turned_off(self):
        self.client.force_authenticate(self.admin)

        response = self.client.put('/api/settings/', {'smtp_use_tls': False}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(AppSetting.objects.get(key='smtp_use_tls').value, 'false')
        self.assertFalse(AppSetting.objects.snapshot().smtp_use_tls)

    def test_rejects_non_numeric_port(self):
        self.client.force_authenticate(self.admin)
        response = self.client.put('/api/settings/', {'smtp_port': 'abc'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logo_upload_sets_company_logo(self):
        self.client.force_authenticate(self.admin)

        with override_settings(MEDIA_ROOT=self.media_root):
            response = self.client.post('/api/upload/logo/', {'image': png_upload()}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('logos/logo-', response.data['url'])
        self.assertEqual(AppSetting.objects.as_dict()['company_logo'], response.data['url'])

    def test_logo_upload_requires_admin(self):
        self.client.force_authenticate(self.employee)
        response = self.client.post('/api/upload/logo/', {'image': png_upload()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class TestHealthAndCommands(TestCase):

    def test_health_endpoint(self):
        response = self.client.get('/api/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'OK')

    def test_readiness_endpoint(self):
        response = self.client.get('/api/health/ready/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['checks']['database']['status'], 'healthy')

    def test_seed_defaults_is_idempotent(self):
        call_command('seed_defaults', stdout=StringIO())
        call_command('seed_defaults', stdout=StringIO())

        self.assertEqual(AppSetting.objects.count(), len(DEFAULT_SETTINGS))
        admin = User.objects.get(email='admin@lalogistics.com')
        self.assertEqual(admin.role, UserRole.ADMIN)
        self.assertTrue(admin.check_password('admin123'))
        self.assertEqual(User.objects.count(), 1)
